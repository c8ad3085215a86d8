"""
Remote Classification Service Implementation.

Fallback path for frames without local codes: uploads the cropped frame
to a hosted multimodal model and interprets its answer as a bank alias
or as "no alias".

Follows:
- SRP: Only handles the remote OCR request and its interpretation
- DIP: Depends on IAccessTokenProvider for authentication
"""

import re
import time
import uuid
from typing import Optional, Tuple

import cv2
import numpy as np
import requests

from alias_scanner.services.interfaces.auth_service_interface import IAccessTokenProvider
from alias_scanner.services.interfaces.base_service_interface import BaseService, ServiceErrorKind
from alias_scanner.services.interfaces.remote_classification_service_interface import (
    ClassificationResult,
    IRemoteClassificationService
)


NEGATIVE_PHRASES = ("no_alias", "no alias", "no detectado", "no puedo", "no veo", "no hay")
ALIAS_PATTERN = re.compile(r"[a-z][a-z0-9]*(\.[a-z0-9]+)+", re.IGNORECASE)
ALIAS_MIN_LENGTH = 6
ALIAS_MAX_LENGTH = 20

_NON_ALIAS_CHARS = re.compile(r"[^a-z0-9.]")


def extractAlias(text: str) -> str:
    """
    Pull an alias candidate out of free-form model output.

    Prefers the first dotted word sequence of valid length; otherwise
    strips everything but letters, digits and dots.

    Args:
        text: Model answer.

    Returns:
        str: Lower-cased candidate (may be shorter than a valid alias).
    """
    match = ALIAS_PATTERN.search(text)
    if match:
        alias = match.group(0).lower()
        if ALIAS_MIN_LENGTH <= len(alias) <= ALIAS_MAX_LENGTH:
            return alias

    cleaned = _NON_ALIAS_CHARS.sub("", text.lower())
    return cleaned or text.lower()


def interpretResponse(text: str) -> Optional[str]:
    """
    Map a model answer to an alias, or None when there is none.

    Args:
        text: Model answer.

    Returns:
        Optional[str]: Alias candidate of at least ALIAS_MIN_LENGTH characters.
    """
    lower = text.lower()
    if any(phrase in lower for phrase in NEGATIVE_PHRASES):
        return None

    candidate = extractAlias(text)
    return candidate if len(candidate) >= ALIAS_MIN_LENGTH else None


class RemoteClassificationService(IRemoteClassificationService, BaseService):
    """
    Multipart upload to the classification gateway.

    An empty token is refreshed before the first attempt. A 401/403 is
    answered with one token refresh and exactly one retry.
    """

    SERVICE_NAME = "remote_classification"

    def __init__(
        self,
        apiUrl: str,
        tokenProvider: IAccessTokenProvider,
        model: str = "gemini-2.5-flash",
        temperature: float = 0.0,
        systemPrompt: str = "You are an OCR. Answer briefly.",
        userPrompt: str = "Find a bank alias in the image. Answer ONLY the alias, or NO_ALIAS.",
        jpegQuality: int = 60,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        debugBasePath: str = "output/debug",
        debugEnabled: bool = False
    ):
        """
        Initialize RemoteClassificationService.

        Args:
            apiUrl: Gateway endpoint.
            tokenProvider: Bearer token source.
            model: Model name sent with the request.
            temperature: Sampling temperature.
            systemPrompt: System prompt.
            userPrompt: Instruction sent with the image.
            jpegQuality: JPEG quality for the upload (0-100).
            timeout: Request timeout in seconds.
            session: HTTP session (a new one when omitted).
            debugBasePath: Base path for debug output.
            debugEnabled: Whether debug output is enabled.
        """
        BaseService.__init__(self, self.SERVICE_NAME, debugBasePath, debugEnabled)

        self._apiUrl = apiUrl
        self._tokenProvider = tokenProvider
        self._model = model
        self._temperature = temperature
        self._systemPrompt = systemPrompt
        self._userPrompt = userPrompt
        self._jpegQuality = jpegQuality
        self._timeout = timeout
        self._session = session or requests.Session()

        self._logger.info(
            f"RemoteClassificationService initialized (model={model}, "
            f"jpegQuality={jpegQuality}, timeout={timeout}s)"
        )

    def classify(self, image: np.ndarray) -> ClassificationResult:
        startTime = time.time()
        requestId = uuid.uuid4().hex[:8]

        token = self._tokenProvider.getToken()
        if not token:
            self._logger.info("No gateway token, refreshing before request")
            if not self._tokenProvider.refreshToken():
                return ClassificationResult(success=False, error=ServiceErrorKind.NO_TOKEN)
            token = self._tokenProvider.getToken()

        ok, encoded = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, self._jpegQuality])
        if not ok:
            self._logger.error("Failed to encode frame as JPEG")
            return ClassificationResult(success=False, error=ServiceErrorKind.INVALID_RESPONSE)
        jpegBytes = encoded.tobytes()

        self._saveDebugImage(requestId, image, prefix="crop")

        try:
            response = self._post(token, jpegBytes)
            if response.status_code in (401, 403):
                self._logger.info(f"Gateway returned {response.status_code}, refreshing token")
                if not self._tokenProvider.refreshToken():
                    return self._failure(ServiceErrorKind.UNAUTHORIZED, startTime)
                response = self._post(self._tokenProvider.getToken(), jpegBytes)
        except requests.exceptions.RequestException as e:
            self._logger.error(f"[{requestId}] Classification request failed: {e}")
            return self._failure(ServiceErrorKind.NETWORK_ERROR, startTime)

        processingTimeMs = self._measureTime(startTime)
        self._logTiming(requestId, processingTimeMs)

        if response.status_code in (401, 403):
            self._logger.error("Gateway token rejected after refresh")
            return self._failure(ServiceErrorKind.UNAUTHORIZED, startTime)

        if response.status_code != 200:
            self._logger.warning(f"[{requestId}] Gateway error: status {response.status_code}")
            return self._failure(ServiceErrorKind.SERVER_ERROR, startTime)

        text, error = self._parseBody(response)
        if error is not None:
            return self._failure(error, startTime)

        self._saveDebugJson(requestId, {"response": text}, prefix="response")
        self._logger.debug(f"[{requestId}] Model answer: {text!r}")

        alias = interpretResponse(text)
        if alias:
            self._logger.info(f"[{requestId}] Alias candidate: {alias}")

        return ClassificationResult(
            success=True,
            alias=alias,
            rawResponse=text,
            processingTimeMs=processingTimeMs
        )

    def _post(self, token: str, jpegBytes: bytes) -> requests.Response:
        data = {
            "model": self._model,
            "temperature": str(self._temperature),
            "system_prompt": self._systemPrompt,
            "user_prompt": self._userPrompt,
        }
        files = {"files": ("photo.jpg", jpegBytes, "image/jpeg")}
        return self._session.post(
            self._apiUrl,
            headers={"Authorization": f"Bearer {token}"},
            data=data,
            files=files,
            timeout=self._timeout
        )

    def _parseBody(self, response: requests.Response) -> Tuple[str, Optional[ServiceErrorKind]]:
        try:
            body = response.json()
        except ValueError:
            self._logger.warning("Gateway response is not JSON")
            return "", ServiceErrorKind.INVALID_RESPONSE

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str):
            self._logger.warning("Gateway response has no 'response' text")
            return "", ServiceErrorKind.INVALID_RESPONSE

        return text, None

    def _failure(self, error: ServiceErrorKind, startTime: float) -> ClassificationResult:
        return ClassificationResult(
            success=False,
            error=error,
            processingTimeMs=self._measureTime(startTime)
        )
