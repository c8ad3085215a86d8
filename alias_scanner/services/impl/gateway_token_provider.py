"""
Gateway Token Provider Implementation.

Holds the bearer token for the remote classification gateway and fetches
a new one from a token endpoint on demand.
"""

import logging
import threading
from typing import Optional

import requests

from alias_scanner.services.interfaces.auth_service_interface import IAccessTokenProvider


logger = logging.getLogger(__name__)


class GatewayTokenProvider(IAccessTokenProvider):
    """
    Token source backed by `GET tokenUrl -> {"token": "..."}`.

    Without a token URL, only the initial token is ever available and
    refreshes fail.
    """

    def __init__(
        self,
        tokenUrl: str = "",
        initialToken: str = "",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None
    ):
        self._tokenUrl = tokenUrl
        self._token = initialToken or None
        self._timeout = timeout
        self._session = session or requests.Session()
        self._lock = threading.Lock()

    def getToken(self) -> Optional[str]:
        with self._lock:
            return self._token

    def refreshToken(self) -> bool:
        if not self._tokenUrl:
            logger.warning("No gateway token URL configured, cannot refresh")
            return False

        try:
            response = self._session.get(self._tokenUrl, timeout=self._timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Gateway token request failed: {e}")
            return False

        if response.status_code != 200:
            logger.error(f"Gateway token request failed: status {response.status_code}")
            return False

        try:
            token = response.json().get("token")
        except (ValueError, AttributeError):
            token = None

        if not isinstance(token, str) or not token:
            logger.error("Gateway token response has no token")
            return False

        with self._lock:
            self._token = token
        logger.info("Gateway token refreshed")
        return True
