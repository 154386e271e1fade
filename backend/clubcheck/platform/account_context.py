"""
Account context for request handlers.

The upstream session/auth layer authenticates the caller and attaches an
AccountContext to request.state.account_context. Route handlers and
dependencies read it through get_account_context().
"""

import logging

from fastapi import Request, HTTPException, status

logger = logging.getLogger(__name__)


class AccountContext:
    """Immutable account identity for the current request."""

    def __init__(self, account_id: str):
        if not account_id:
            raise ValueError("account_id cannot be empty")
        self._account_id = account_id

    @property
    def account_id(self) -> str:
        return self._account_id

    def __repr__(self) -> str:
        return f"<AccountContext(account_id={self._account_id})>"


def get_account_context(request: Request) -> AccountContext:
    """
    Extract account context from request state.

    Raises 401 if the request was not authenticated upstream.
    """
    context = getattr(request.state, "account_context", None)
    if context is None:
        logger.warning("Route handler accessed without account context", extra={
            "path": request.url.path
        })
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized"
        )
    return context
