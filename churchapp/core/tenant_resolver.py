"""
Tenant context resolution from bearer tokens.

Decodes the token, validates the claim schema and builds a TenantContext.
A member-typed token missing any of memberId/role/branchId/churchId is
treated as incomplete rather than rejected.
"""

from pydantic import ValidationError

from churchapp.core.exceptions import UnauthorizedException
from churchapp.core.logging import get_logger
from churchapp.core.security import decode_jwt
from churchapp.models.tenant_context import TenantContext
from churchapp.schemas.auth_schemas import TokenClaims

logger = get_logger(__name__)


def context_from_claims(payload: dict) -> TenantContext:
    """
    Build a TenantContext from decoded token claims.

    Raises:
        UnauthorizedException: If the claims don't match the token schema
    """
    try:
        claims = TokenClaims.model_validate(payload)
    except ValidationError as e:
        logger.warning("Rejected token with malformed claims", errors=e.error_count())
        raise UnauthorizedException("Invalid token claims")

    base = dict(
        user_id=claims.sub,
        email=claims.email,
        name=claims.name,
        onboarding_completed=claims.onboardingCompleted,
    )

    tenant_fields = (claims.memberId, claims.role, claims.branchId, claims.churchId)
    if claims.type == "user" or None in tenant_fields:
        return TenantContext(**base)

    return TenantContext(
        **base,
        member_id=claims.memberId,
        role=claims.role,
        branch_id=claims.branchId,
        church_id=claims.churchId,
        permissions=frozenset(claims.permissions),
    )


def resolve_tenant_context(token: str) -> TenantContext:
    """
    Decode a bearer token into the caller's tenant context.

    Raises:
        UnauthorizedException: If token invalid, expired or malformed
    """
    return context_from_claims(decode_jwt(token))
