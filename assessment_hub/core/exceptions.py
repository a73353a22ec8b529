from typing import Any, Dict, Iterable, List, Optional


def field_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic error dicts into ``{"field", "msg"}`` pairs."""
    flattened = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        flattened.append({"field": ".".join(loc) or "unknown", "msg": error["msg"]})
    return flattened


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

    def to_content(self) -> Dict[str, Any]:
        """Body returned to the client: always a message, plus any details."""
        content: Dict[str, Any] = {"message": self.message}
        if self.details:
            content.update(self.details)
        return content


class ValidationFailedError(AppException):
    def __init__(self, message: str = "Invalid request data", errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_FAILED",
            details={"errors": errors} if errors else None
        )


class NotFoundError(AppException):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )


class AIError(AppException):
    """Upstream language-model failure. The underlying error text is passed through."""
    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="AI_SERVICE_ERROR",
            details={"error": error} if error else None
        )


class AIKillSwitchError(AppException):
    def __init__(self):
        super().__init__(
            message="AI services are currently offline for maintenance.",
            status_code=503,
            error_code="AI_KILL_SWITCH_ACTIVE"
        )


class AuthenticationError(AppException):
    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class AccessDeniedError(AppException):
    """Custom permission error. Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )
