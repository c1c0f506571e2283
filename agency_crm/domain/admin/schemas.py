"""Admin domain schemas - settings, roles and import"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from ...models import APP_ROLES
from ...shared.validators import validate_choice


class SettingResponse(BaseModel):
    key: str
    value: Any = None
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SettingUpdate(BaseModel):
    value: Any
    description: Optional[str] = None


class RoleRequest(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        return validate_choice(v, APP_ROLES, "role")


class ProfileResponse(BaseModel):
    """Authenticated staff user and the roles they hold"""

    id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    roles: list[str] = Field(default_factory=list, validation_alias="role_names")
    is_team_member: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImportResponse(BaseModel):
    message: str
    count: int
    skipped: int


class OptionsResponse(BaseModel):
    timezones: list[dict]
    times: list[dict]
    durations: list[dict]
