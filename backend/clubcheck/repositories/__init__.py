"""Repository layer over the ClubCheck database."""

from clubcheck.repositories.account_repository import AccountRepository

__all__ = ["AccountRepository"]
