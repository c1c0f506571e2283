"""Admin router - settings, roles, CSV import, form options and the current user"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_profile, get_current_user, require_admin
from ...database import get_db
from ...models import Profile
from ...services.job_calculations import DURATION_OPTIONS, TIME_OPTIONS
from ...shared.timezones import TIMEZONE_OPTIONS
from .schemas import (
    ImportResponse,
    OptionsResponse,
    ProfileResponse,
    RoleRequest,
    SettingResponse,
    SettingUpdate,
)
from .service import AdminService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])
auth_router = APIRouter(prefix="/auth", tags=["Auth"])


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@auth_router.get("/me", response_model=ProfileResponse)
async def get_me(profile: Profile = Depends(get_current_profile)):
    """Current profile and roles; available before any role is granted"""
    return profile


@router.get("/options", response_model=OptionsResponse)
async def get_options(current_user: Profile = Depends(get_current_user)):
    """Selectable timezones, start times and job durations"""
    return {"timezones": TIMEZONE_OPTIONS, "times": TIME_OPTIONS, "durations": DURATION_OPTIONS}


# ============================================================================
# SETTINGS
# ============================================================================


@router.get("/settings", response_model=list[SettingResponse])
async def list_settings(
    current_user: Profile = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_settings()


@router.get("/settings/{key}", response_model=SettingResponse)
async def get_setting(
    key: str,
    current_user: Profile = Depends(get_current_user),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_setting(key)


@router.put("/settings/{key}", response_model=SettingResponse)
async def update_setting(
    key: str,
    data: SettingUpdate,
    current_user: Profile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.update_setting(key, data.value, data.description)


# ============================================================================
# USERS AND ROLES
# ============================================================================


@router.get("/users", response_model=list[ProfileResponse])
async def list_users(
    current_user: Profile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.get_profiles()


@router.post("/users/{profile_id}/roles", response_model=ProfileResponse)
async def grant_role(
    profile_id: int,
    data: RoleRequest,
    current_user: Profile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.grant_role(profile_id, data.role)


@router.delete("/users/{profile_id}/roles/{role}", response_model=ProfileResponse)
async def revoke_role(
    profile_id: int,
    role: str,
    current_user: Profile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return service.revoke_role(profile_id, role, current_user)


# ============================================================================
# IMPORT
# ============================================================================


@router.post("/import", response_model=ImportResponse)
async def import_csv_data(
    import_type: str = Form(...),
    file: UploadFile = File(...),
    current_user: Profile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    """Replace all interpreters or facilities with the rows of an uploaded CSV"""
    content = await file.read()
    try:
        csv_data = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded") from e

    logger.info(f"📊 {current_user.email} importing {import_type} from {file.filename}")
    return service.import_data(import_type, csv_data)
