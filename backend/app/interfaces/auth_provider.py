"""
Authentication provider interface.

Defines the contract for resolving a bearer token to a user.
Implementations: MockAuthProvider (local development and tests)
"""

from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """Authenticated user."""

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None


class IAuthProvider(ABC):
    """Abstract interface for authentication providers."""

    @abstractmethod
    async def verify_token(self, token: str) -> User:
        """Verify a token and return the user it belongs to."""
        pass

    @abstractmethod
    def is_enabled(self) -> bool:
        """Check if authentication is required."""
        pass
