"""
Transfer Service Implementation.

Executes a cash-out transfer to a validated alias.

Follows:
- SRP: Only builds and sends transfer requests
- DIP: Depends on IAuthTokenService for the backend token
"""

import uuid
from typing import Any, Dict, Optional

import requests

from alias_scanner.services.interfaces.alias_validation_service_interface import AliasData
from alias_scanner.services.interfaces.auth_service_interface import IAuthTokenService
from alias_scanner.services.interfaces.base_service_interface import BaseService, ServiceErrorKind
from alias_scanner.services.interfaces.transfer_service_interface import (
    ITransferService,
    TransferResult
)


SUCCESS_STATUSES = (200, 201, 202)


class TransferService(ITransferService, BaseService):
    """
    POST of a JSON transfer order with the backend bearer token.

    On 401/403 the token is cleared, the user logs in again and the
    transfer is retried exactly once.
    """

    SERVICE_NAME = "transfer"

    def __init__(
        self,
        endpoint: str,
        authService: IAuthTokenService,
        pin: str,
        deviceId: Optional[str] = None,
        concept: str = "VAR",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize TransferService.

        Args:
            endpoint: Transfer endpoint.
            authService: Backend token source.
            pin: Transaction PIN.
            deviceId: Device identifier; a random one per service instance when omitted.
            concept: Transfer concept code.
            timeout: Request timeout in seconds.
            session: HTTP session (a new one when omitted).
            debugBasePath: Base path for debug output.
            debugEnabled: Whether debug output is enabled.
        """
        BaseService.__init__(self, self.SERVICE_NAME, debugBasePath, debugEnabled)

        self._endpoint = endpoint
        self._authService = authService
        self._pin = pin
        self._deviceId = deviceId or str(uuid.uuid4()).upper()
        self._concept = concept
        self._timeout = timeout
        self._session = session or requests.Session()

    def buildRequestBody(self, amount: float, aliasData: AliasData, category: str) -> Dict[str, Any]:
        return {
            "amount": amount,
            "bankId": aliasData.bankId,
            "beneficiary": aliasData.fullName,
            "category": category,
            "comment": "",
            "concept": self._concept,
            "destination": aliasData.cvu,
            "destinationName": aliasData.fullName,
            "destinationTaxDocument": aliasData.taxDocument,
            "DeviceId": self._deviceId,
            "financialEntity": aliasData.entity,
            "isTrinity": False,
            "pin": self._pin,
        }

    def executeTransfer(self, amount: float, aliasData: AliasData, category: str) -> TransferResult:
        if not self._authService.ensureValidToken():
            self._logger.error("No valid backend token for transfer")
            return TransferResult(success=False, error=ServiceErrorKind.NO_TOKEN)

        body = self.buildRequestBody(amount, aliasData, category)
        self._logger.info(f"Transfer of {amount:.2f} to {aliasData.alias} ({category})")

        try:
            response = self._post(body)
            if response.status_code in (401, 403):
                self._logger.info("Backend token expired during transfer, re-authenticating")
                self._authService.clearToken()
                if not self._authService.authenticate():
                    return TransferResult(
                        success=False,
                        error=ServiceErrorKind.UNAUTHORIZED,
                        statusCode=response.status_code
                    )
                response = self._post(body)
        except requests.exceptions.RequestException as e:
            self._logger.error(f"Transfer request failed: {e}")
            return TransferResult(success=False, error=ServiceErrorKind.NETWORK_ERROR)

        return self._interpret(response)

    def _post(self, body: Dict[str, Any]) -> requests.Response:
        return self._session.post(
            self._endpoint,
            json=body,
            headers={"Authorization": f"Bearer {self._authService.getToken()}"},
            timeout=self._timeout
        )

    def _interpret(self, response: requests.Response) -> TransferResult:
        status = response.status_code

        if status in SUCCESS_STATUSES:
            try:
                payload = response.json()
            except ValueError:
                payload = None
            if not isinstance(payload, dict):
                payload = {}

            result = TransferResult(
                success=True,
                transactionId=payload.get("transaction_id"),
                authorizationId=payload.get("authorization_id"),
                statusCode=status
            )
            self._saveDebugJson(result.transactionId or uuid.uuid4().hex[:8], payload, prefix="transfer")
            self._logger.info(f"Transfer accepted (transaction={result.transactionId})")
            return result

        if status in (401, 403):
            self._logger.error("Backend token rejected after re-authentication")
            return TransferResult(success=False, error=ServiceErrorKind.UNAUTHORIZED, statusCode=status)

        self._logger.error(f"Transfer backend error {status}: {response.text[:500]}")
        return TransferResult(
            success=False,
            error=ServiceErrorKind.SERVER_ERROR,
            statusCode=status,
            message=response.text
        )
