"""Re-read the caller's membership from the store for mutation endpoints."""

from dataclasses import replace

from sqlalchemy.orm import Session

from churchapp.core import access
from churchapp.core.exceptions import ForbiddenException
from churchapp.models.tenant_context import TenantContext
from churchapp.repositories.member_repository import MemberRepository


def refresh_requester_context(db: Session, context: TenantContext) -> TenantContext:
    """
    Replace token-carried role/branch/grants with the stored values.

    Token claims may be stale (a demoted admin keeps an old token until it
    expires); mutations decide on the stored state instead.

    Raises:
        ForbiddenException: If the context is incomplete or the membership
            no longer matches the token's tenant
    """
    access.authorize(context)
    member = MemberRepository(db).get_by_id(context.member_id)
    if not member or member.user_id != context.user_id or member.church_id != context.church_id:
        raise ForbiddenException(access.ACCESS_DENIED)
    return replace(
        context,
        role=member.role,
        branch_id=member.branch_id,
        permissions=frozenset(member.permission_types),
    )
