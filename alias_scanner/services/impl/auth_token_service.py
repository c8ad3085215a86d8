"""
Auth Token Service Implementation.

Backend login for alias validation and transfers. Performs an OAuth
password grant, then reads the backend token from a claim of the
returned access token (JWT).

Follows:
- SRP: Only handles obtaining and caching the backend token
- DIP: Consumers depend on IAuthTokenService
"""

import base64
import binascii
import json
import threading
import time
from typing import Any, Callable, Dict, Optional

import requests

from alias_scanner.services.interfaces.auth_service_interface import IAuthTokenService
from alias_scanner.services.interfaces.base_service_interface import BaseService


DEFAULT_TOKEN_CLAIM = "http://cognito-proxy.ua.la/cognito_access_token"


def decodeJwtPayload(jwt: str) -> Optional[Dict[str, Any]]:
    """
    Decode the payload segment of a JWT without verifying it.

    Args:
        jwt: Compact-serialized token.

    Returns:
        Optional[Dict[str, Any]]: Claims, or None if the token is malformed.
    """
    parts = jwt.split(".")
    if len(parts) < 2:
        return None

    segment = parts[1]
    segment += "=" * (-len(segment) % 4)

    try:
        claims = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
    except (binascii.Error, ValueError, UnicodeError):
        return None

    return claims if isinstance(claims, dict) else None


class AuthTokenService(IAuthTokenService, BaseService):
    """
    Password-grant login with an in-memory token cache.

    The backend token is considered valid for `tokenLifetime` seconds
    after login. All public methods are safe to call from worker threads.
    """

    SERVICE_NAME = "auth"

    def __init__(
        self,
        tokenUrl: str,
        clientId: str,
        audience: str,
        username: str,
        password: str,
        connection: str = "Username-Password-Authentication",
        device: str = "00000",
        scope: str = "openid profile email offline_access",
        tokenClaim: str = DEFAULT_TOKEN_CLAIM,
        tokenLifetime: float = 25 * 60,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        timeSource: Callable[[], float] = time.time,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize AuthTokenService.

        Args:
            tokenUrl: OAuth token endpoint.
            clientId: OAuth client id.
            audience: OAuth audience.
            username: Login user.
            password: Login password.
            connection: Identity provider connection name.
            device: Device identifier sent with the grant.
            scope: Requested scopes.
            tokenClaim: Claim of the access token holding the backend token.
            tokenLifetime: Seconds a fresh token is trusted.
            timeout: Request timeout in seconds.
            session: HTTP session (a new one when omitted).
            timeSource: Wall-clock source for expiration.
            debugBasePath: Base path for debug output.
            debugEnabled: Whether debug output is enabled.
        """
        BaseService.__init__(self, self.SERVICE_NAME, debugBasePath, debugEnabled)

        self._tokenUrl = tokenUrl
        self._clientId = clientId
        self._audience = audience
        self._username = username
        self._password = password
        self._connection = connection
        self._device = device
        self._scope = scope
        self._tokenClaim = tokenClaim
        self._tokenLifetime = tokenLifetime
        self._timeout = timeout
        self._session = session or requests.Session()
        self._timeSource = timeSource

        self._token: Optional[str] = None
        self._expiresAt: Optional[float] = None
        self._lock = threading.RLock()

    def authenticate(self) -> bool:
        body = {
            "grant_type": "password",
            "username": self._username,
            "password": self._password,
            "client_id": self._clientId,
            "audience": self._audience,
            "scope": self._scope,
            "connection": self._connection,
            "device": self._device,
        }

        with self._lock:
            try:
                response = self._session.post(self._tokenUrl, json=body, timeout=self._timeout)
            except requests.exceptions.RequestException as e:
                self._logger.error(f"Login request failed: {e}")
                return False

            if response.status_code != 200:
                self._logger.error(f"Login failed: status {response.status_code}")
                return False

            try:
                accessToken = response.json().get("access_token")
            except (ValueError, AttributeError):
                accessToken = None

            if not isinstance(accessToken, str) or not accessToken:
                self._logger.error("No access_token in login response")
                return False

            claims = decodeJwtPayload(accessToken)
            backendToken = claims.get(self._tokenClaim) if claims else None
            if not isinstance(backendToken, str) or not backendToken:
                self._logger.error(f"Access token has no '{self._tokenClaim}' claim")
                return False

            self._token = backendToken
            self._expiresAt = self._timeSource() + self._tokenLifetime
            self._logger.info(f"Backend token obtained (valid for {self._tokenLifetime / 60:.0f} min)")
            return True

    def ensureValidToken(self) -> bool:
        with self._lock:
            if self.isTokenValid():
                return True
            return self.authenticate()

    def isTokenValid(self) -> bool:
        with self._lock:
            if not self._token or self._expiresAt is None:
                return False
            return self._timeSource() < self._expiresAt

    def getToken(self) -> Optional[str]:
        with self._lock:
            return self._token

    def clearToken(self) -> None:
        with self._lock:
            self._token = None
            self._expiresAt = None
