from typing import List

from fastapi import APIRouter, Depends

from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_current_user
from assessment_hub.schemas.department import Department
from assessment_hub.storage import Storage

router = APIRouter(
    prefix="/departments",
    tags=["departments"],
    dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=List[Department])
def list_departments(storage: Storage = Depends(get_storage)):
    """Fixed department catalog."""
    return storage.get_departments()
