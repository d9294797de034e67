from pydantic import BaseModel, Field
from churchapp.models.role import Role


class PermissionCatalogEntry(BaseModel):
    type: str
    restricted: bool


class PermissionAssignRequest(BaseModel):
    """Full replacement set of permission types for one member"""

    permissions: list[str] = Field(default_factory=list)


class PermissionAssignResponse(BaseModel):
    """
    Resulting grants of the target member.

    token is set only when the caller changed their own grants.
    """

    member_id: str
    role: Role
    permissions: list[str]
    token: str | None = None
