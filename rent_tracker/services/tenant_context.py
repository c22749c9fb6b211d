"""
Tenant and role resolution from authenticated identity claims.
"""

from collections.abc import Mapping
from typing import Any

from rent_tracker.core.exceptions import TenantError
from rent_tracker.core.logger import get_logger

logger = get_logger()


class TenantContext:
    """Claims accessor for the current caller.

    The tenant id is the caller's subject claim; roles come from either a
    ``roles`` list or a single ``role`` claim.
    """

    TENANT_CLAIM = "sub"

    def __init__(self, claims: Mapping[str, Any] | None = None) -> None:
        self.claims = dict(claims or {})

    def get_tenant_id(self) -> str | None:
        value = self.claims.get(self.TENANT_CLAIM)
        if value is None:
            return None
        tenant_id = str(value).strip()
        return tenant_id or None

    def require_tenant_id(self) -> str:
        """Return the tenant id or raise TenantError when the claim is absent."""
        tenant_id = self.get_tenant_id()
        if tenant_id is None:
            logger.warning("Tenant claim not found")
            raise TenantError("Tenant ID not found in claims")
        return tenant_id

    def is_in_role(self, role: str) -> bool:
        roles = self.claims.get("roles") or []
        if isinstance(roles, str):
            roles = [roles]
        single_role = self.claims.get("role")
        if single_role:
            roles = [*roles, single_role]
        return role in roles
