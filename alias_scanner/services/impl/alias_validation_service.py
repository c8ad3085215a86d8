"""
Alias Validation Service Implementation.

Looks up the account behind a bank alias on the transfers backend.

Follows:
- SRP: Only handles alias lookups
- DIP: Depends on IAuthTokenService for the backend token
"""

from typing import Optional

import requests

from alias_scanner.services.interfaces.alias_validation_service_interface import (
    AliasInfo,
    AliasValidationResult,
    IAliasValidationService
)
from alias_scanner.services.interfaces.auth_service_interface import IAuthTokenService
from alias_scanner.services.interfaces.base_service_interface import BaseService, ServiceErrorKind


class AliasValidationService(IAliasValidationService, BaseService):
    """
    GET {baseUrl}/identifiers/info?identifier=<alias>&currency=<currency>

    On 401/403 the backend token is cleared, the user logs in again and
    the lookup is retried exactly once.
    """

    SERVICE_NAME = "alias_validation"

    def __init__(
        self,
        baseUrl: str,
        authService: IAuthTokenService,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        BaseService.__init__(self, self.SERVICE_NAME, debugBasePath, debugEnabled)

        self._baseUrl = baseUrl.rstrip("/")
        self._authService = authService
        self._timeout = timeout
        self._session = session or requests.Session()

    def validateAlias(self, alias: str, currency: str = "ars") -> AliasValidationResult:
        if not self._authService.ensureValidToken():
            self._logger.error("No valid backend token")
            return AliasValidationResult(success=False, error=ServiceErrorKind.NO_TOKEN)

        try:
            response = self._request(alias, currency)
            if response.status_code in (401, 403):
                self._logger.info("Backend token expired, re-authenticating")
                self._authService.clearToken()
                if not self._authService.authenticate():
                    return AliasValidationResult(
                        success=False,
                        error=ServiceErrorKind.UNAUTHORIZED,
                        statusCode=response.status_code
                    )
                response = self._request(alias, currency)
        except requests.exceptions.RequestException as e:
            self._logger.error(f"Alias validation request failed: {e}")
            return AliasValidationResult(success=False, error=ServiceErrorKind.NETWORK_ERROR)

        return self._interpret(alias, response)

    def _request(self, alias: str, currency: str) -> requests.Response:
        token = self._authService.getToken()
        return self._session.get(
            f"{self._baseUrl}/identifiers/info",
            params={"identifier": alias, "currency": currency},
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout
        )

    def _interpret(self, alias: str, response: requests.Response) -> AliasValidationResult:
        status = response.status_code

        if status == 200:
            try:
                body = response.json()
            except ValueError:
                body = None
            if not isinstance(body, dict):
                self._logger.warning("Alias response is not a JSON object")
                return AliasValidationResult(
                    success=False, error=ServiceErrorKind.INVALID_RESPONSE, statusCode=status
                )

            self._saveDebugJson(alias, body, prefix="alias")
            self._logger.info(f"Alias validated: {alias}")
            return AliasValidationResult(
                success=True, aliasInfo=AliasInfo.fromResponse(body), statusCode=status
            )

        if status in (401, 403):
            self._logger.error("Backend token rejected after re-authentication")
            return AliasValidationResult(
                success=False, error=ServiceErrorKind.UNAUTHORIZED, statusCode=status
            )

        if status == 404:
            self._logger.info(f"Alias not found: {alias}")
            return AliasValidationResult(
                success=False, error=ServiceErrorKind.NOT_FOUND, statusCode=status
            )

        self._logger.warning(f"Alias backend error {status}: {response.text[:200]}")
        return AliasValidationResult(
            success=False, error=ServiceErrorKind.INVALID_RESPONSE, statusCode=status
        )
