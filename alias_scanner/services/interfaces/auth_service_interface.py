"""
Auth Service Interface Module.

Defines the interfaces for bearer-token sources used by the HTTP
collaborators.

Follows:
- ISP: Token access is separate from the services that consume tokens
- DIP: Services depend on these abstractions, not on a concrete login flow
"""

from abc import ABC, abstractmethod
from typing import Optional


class IAccessTokenProvider(ABC):
    """
    Minimal bearer-token source.

    Used by the remote classification service, whose gateway issues
    tokens independently of the backend login.
    """

    @abstractmethod
    def getToken(self) -> Optional[str]:
        """
        Get the current token.

        Returns:
            Optional[str]: Token, or None if none has been obtained yet.
        """
        pass

    @abstractmethod
    def refreshToken(self) -> bool:
        """
        Obtain a new token.

        Returns:
            bool: True if a non-empty token is now available.
        """
        pass


class IAuthTokenService(ABC):
    """
    Interface for the backend login used by alias validation and transfers.
    """

    @abstractmethod
    def authenticate(self) -> bool:
        """
        Log in and store a fresh backend token.

        Returns:
            bool: True on success.
        """
        pass

    @abstractmethod
    def ensureValidToken(self) -> bool:
        """
        Authenticate only when there is no unexpired token.

        Returns:
            bool: True if a valid token is available afterwards.
        """
        pass

    @abstractmethod
    def isTokenValid(self) -> bool:
        """Check whether a non-empty, unexpired token is stored."""
        pass

    @abstractmethod
    def getToken(self) -> Optional[str]:
        """Get the stored token, valid or not."""
        pass

    @abstractmethod
    def clearToken(self) -> None:
        """Forget the stored token and its expiration."""
        pass
