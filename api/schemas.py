"""
API Request/Response Schemas.

Centralized Pydantic models for API input validation.
All POST/PUT/PATCH endpoints use these models for type-safe validation.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from navigation import Group, LayoutRecord, RoleUISettings

_HEX_COLOR = r"^#[0-9a-fA-F]{6}$"


# =============================================================================
# LAYOUT SCHEMAS
# =============================================================================


class LayoutConfig(BaseModel):
    """Wire shape of a layout record."""
    order: list[str]
    hidden: list[str]

    @classmethod
    def from_record(cls, record: LayoutRecord) -> "LayoutConfig":
        return cls(order=list(record.order), hidden=list(record.hidden))

    def to_record(self) -> LayoutRecord:
        return LayoutRecord(order=tuple(self.order), hidden=tuple(self.hidden))


class LayoutSaveRequest(BaseModel):
    """Request to replace a feature's layout."""
    config: LayoutConfig


class LayoutResponse(BaseModel):
    success: bool = True
    data: Optional[LayoutConfig] = None


class LayoutListResponse(BaseModel):
    success: bool = True
    data: dict[str, LayoutConfig] = Field(default_factory=dict)


# =============================================================================
# SIDEBAR SCHEMAS
# =============================================================================


class GroupSchema(BaseModel):
    """A sidebar group as stored and edited by the sidebar builder."""
    id: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1, max_length=100)
    icon: str = "Folder"
    color: str = "primary"
    modules: list[str] = Field(default_factory=list)
    nestedModules: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def from_group(cls, group: Group) -> "GroupSchema":
        return cls(**group.to_dict())

    def to_group(self) -> Group:
        return Group.from_dict(self.model_dump())


class SidebarSaveRequest(BaseModel):
    """Request to save a role's sidebar groups."""
    groups: list[GroupSchema]

    @field_validator("groups", mode="before")
    @classmethod
    def parse_serialized_groups(cls, v: Any) -> Any:
        """Older editors post the group list as a JSON string."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except ValueError as e:
                raise ValueError("groups must be a list or a JSON-encoded list") from e
        return v


class SidebarResponse(BaseModel):
    success: bool = True
    role: str
    groups: list[GroupSchema]
    is_default: bool = False


class SidebarListResponse(BaseModel):
    success: bool = True
    data: dict[str, list[GroupSchema]] = Field(default_factory=dict)


class ResetResponse(BaseModel):
    success: bool = True
    removed: int = 0


# =============================================================================
# UI SETTINGS SCHEMAS
# =============================================================================


class UISettingsPatch(BaseModel):
    """Partial update of a role's UI settings. Omitted fields are unchanged."""
    primary_color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    accent_color: Optional[str] = Field(default=None, pattern=_HEX_COLOR)
    sidebar_modules: Optional[list[str]] = None
    dashboard_widgets: Optional[list[str]] = None


class UISettingsResponse(BaseModel):
    role: str
    primary_color: str
    accent_color: str
    sidebar_modules: list[str]
    dashboard_widgets: list[str]

    @classmethod
    def from_settings(cls, settings: RoleUISettings) -> "UISettingsResponse":
        return cls(**settings.to_dict())


# =============================================================================
# TENANT OVERRIDE SCHEMAS
# =============================================================================


class TenantOverrideRequest(BaseModel):
    """A tenant's module list for one role."""
    modules: list[str]


class TenantOverrideResponse(BaseModel):
    tenant_id: str
    role: str
    modules: Optional[list[str]] = None
