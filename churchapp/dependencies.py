from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from churchapp.core.exceptions import UnauthorizedException
from churchapp.core.tenant_resolver import resolve_tenant_context
from churchapp.models.tenant_context import TenantContext

security = HTTPBearer(auto_error=False)


async def get_tenant_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TenantContext:
    """
    FastAPI dependency resolving the caller's tenant context.

    Flow:
    1. Extract token from Authorization: Bearer <token>
    2. Validate JWT signature and expiry using SECRET_KEY
    3. Validate the claim schema
    4. Return a TenantContext (incomplete for users without a Member)

    Whether an incomplete context is acceptable is decided per endpoint.

    Raises:
        UnauthorizedException: If the header is missing or the token is invalid
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Not authenticated")
    return resolve_tenant_context(credentials.credentials)
