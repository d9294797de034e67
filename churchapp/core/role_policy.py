"""
Static role policy: role ranks and the permission catalog.

Pure functions over the fixed Role enum and PermissionType catalog.
Unknown identifiers are input errors (ValidationException), never mapped
to a default.
"""

from enum import Enum as PyEnum
from typing import Iterable

from churchapp.core.exceptions import ValidationException
from churchapp.models.role import Role


class PermissionType(str, PyEnum):
    """Resource-action grants a member can hold"""

    MEMBERS_VIEW = "members_view"
    MEMBERS_MANAGE = "members_manage"
    EVENTS_MANAGE = "events_manage"
    DEVOTIONAL_MANAGE = "devotional_manage"
    FINANCES_MANAGE = "finances_manage"
    CONTRIBUTIONS_MANAGE = "contributions_manage"
    CHURCH_MANAGE = "church_manage"


# permission -> requires COORDINATOR or higher
PERMISSION_CATALOG: dict[PermissionType, bool] = {
    PermissionType.MEMBERS_VIEW: False,
    PermissionType.MEMBERS_MANAGE: True,
    PermissionType.EVENTS_MANAGE: False,
    PermissionType.DEVOTIONAL_MANAGE: False,
    PermissionType.FINANCES_MANAGE: True,
    PermissionType.CONTRIBUTIONS_MANAGE: True,
    PermissionType.CHURCH_MANAGE: True,
}

ROLE_RANK: dict[Role, int] = {
    Role.MEMBER: 0,
    Role.COORDINATOR: 1,
    Role.ADMINFILIAL: 2,
    Role.ADMINGERAL: 3,
}

# Held by every member regardless of explicit grants
ALWAYS_GRANTED = PermissionType.MEMBERS_VIEW

# Minimum role able to hold a restricted permission
RESTRICTED_ROLE_FLOOR = Role.COORDINATOR

# Minimum role able to assign permissions or change roles
ASSIGNER_ROLE_FLOOR = Role.ADMINFILIAL

# Roles whose effective permission set is the whole catalog
FULL_ACCESS_ROLES = frozenset({Role.ADMINFILIAL, Role.ADMINGERAL})


def parse_role(value: Role | str) -> Role:
    """Convert a raw value to Role, raising ValidationException if unknown"""
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        raise ValidationException(f"Invalid role: {value}")


def parse_permission(value: PermissionType | str) -> PermissionType:
    """Convert a raw value to PermissionType, raising ValidationException if unknown"""
    if isinstance(value, PermissionType):
        return value
    try:
        return PermissionType(value)
    except ValueError:
        raise ValidationException(f"Invalid permission type: {value}")


def parse_permissions(values: Iterable[PermissionType | str]) -> set[PermissionType]:
    """Parse a collection of permission identifiers, naming every unknown value"""
    parsed: set[PermissionType] = set()
    invalid: list[str] = []
    for value in values:
        try:
            parsed.add(parse_permission(value))
        except ValidationException:
            invalid.append(str(value))
    if invalid:
        raise ValidationException(f"Invalid permission type: {', '.join(invalid)}")
    return parsed


def role_rank(role: Role | str) -> int:
    """MEMBER=0, COORDINATOR=1, ADMINFILIAL=2, ADMINGERAL=3"""
    return ROLE_RANK[parse_role(role)]


def role_at_least(role: Role | str, floor: Role | str) -> bool:
    return role_rank(role) >= role_rank(floor)


def is_restricted(permission: PermissionType | str) -> bool:
    """True if the permission may only be held by COORDINATOR or higher"""
    return PERMISSION_CATALOG[parse_permission(permission)]


def allowed_permissions(role: Role | str) -> frozenset[PermissionType]:
    """Permission types that may be granted to a member holding `role`"""
    if role_at_least(role, RESTRICTED_ROLE_FLOOR):
        return frozenset(PERMISSION_CATALOG)
    return frozenset(p for p, restricted in PERMISSION_CATALOG.items() if not restricted)


def effective_permissions(
    role: Role | str | None, granted: Iterable[PermissionType | str]
) -> frozenset[str]:
    """
    Explicit grants, plus the whole catalog for ADMINFILIAL/ADMINGERAL,
    plus the always-on members_view.

    Unknown grant values are ignored here; they can only come from stale
    tokens and never widen access.
    """
    result = {ALWAYS_GRANTED.value}
    for permission in granted:
        value = permission.value if isinstance(permission, PermissionType) else str(permission)
        if value in PermissionType._value2member_map_:
            result.add(value)
    if role is not None and parse_role(role) in FULL_ACCESS_ROLES:
        result.update(p.value for p in PERMISSION_CATALOG)
    return frozenset(result)


def rejected_for_role(
    role: Role | str, requested: Iterable[PermissionType | str]
) -> list[str]:
    """Requested permission types the role is not eligible for, sorted"""
    allowed = allowed_permissions(role)
    return sorted(p.value for p in parse_permissions(requested) if p not in allowed)


def retained_on_role_change(
    new_role: Role | str, current: Iterable[PermissionType | str]
) -> set[str]:
    """(current ∩ allowed(new_role)) ∪ {members_view}"""
    allowed = allowed_permissions(new_role)
    retained = {p.value for p in parse_permissions(current) if p in allowed}
    retained.add(ALWAYS_GRANTED.value)
    return retained
