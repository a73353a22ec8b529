"""
Shared FastAPI dependencies.

The record store is built once in the application lifespan and kept on
``app.state``; handlers receive it through ``get_storage`` so tests can
swap in a fresh store with ``app.dependency_overrides``.
"""
from fastapi import Request

from assessment_hub.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


__all__ = ["get_storage"]
