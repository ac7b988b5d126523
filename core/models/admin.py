# =============================================================================
# core/models/admin.py - Admin, Audit & Visitor Schemas
# =============================================================================
# - AdminPermissions: Capability flags attached to an admin account
# - AdminUserCreate / AdminUserDelete / PasswordChange: CMS user management
# - LoginRequest / LoginResponse: Cookie session handshake
# - VisitorHeartbeat: Anonymous visitor analytics ping
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class AdminPermissions(BaseModel):
    """
    Capability flags for an admin account.

    `isGod` implies every other flag.
    """

    model_config = ConfigDict(populate_by_name=True)

    can_edit: bool = Field(default=False, alias="canEdit")
    can_delete: bool = Field(default=False, alias="canDelete")
    can_manage_users: bool = Field(default=False, alias="canManageUsers")
    can_view_logs: bool = Field(default=False, alias="canViewLogs")
    is_god: bool = Field(default=False, alias="isGod")

    def allows(self, permission: str) -> bool:
        """
        Check a permission by its stored name (e.g. "canEdit").

        Unknown names are denied unless the account is a god account.
        """
        if self.is_god:
            return True
        return bool(self.model_dump(by_alias=True).get(permission, False))

    @classmethod
    def root(cls) -> "AdminPermissions":
        return cls(canEdit=True, canDelete=True, canManageUsers=True, canViewLogs=True, isGod=True)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    csrf_token: str = Field(..., alias="csrfToken")
    permissions: AdminPermissions


class AdminUserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    permissions: AdminPermissions = Field(default_factory=AdminPermissions)


class AdminUserDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_user: str = Field(..., alias="targetUser", min_length=1)


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=1)


class VisitorHeartbeat(BaseModel):
    """Periodic ping sent by the SPA while a visitor has the portal open."""

    model_config = ConfigDict(populate_by_name=True)

    visitor_id: str | None = Field(default=None, alias="visitorId")
    display_name: str | None = Field(default=None, alias="displayName")
    time_spent: float | None = Field(default=None, alias="timeSpent")
    visit_count: int | None = Field(default=None, alias="visitCount")
