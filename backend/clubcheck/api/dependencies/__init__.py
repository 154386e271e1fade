"""Reusable FastAPI dependencies."""

from clubcheck.api.dependencies.entitlements import (
    get_account_repository,
    get_billing_settings,
    require_member_capacity,
    require_write_access_dependency,
)

__all__ = [
    "get_account_repository",
    "get_billing_settings",
    "require_member_capacity",
    "require_write_access_dependency",
]
