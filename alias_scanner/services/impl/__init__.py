"""
Services Implementation Package.

Exports all service implementations for the alias scanner.
"""

from alias_scanner.services.impl.config_service import ConfigService
from alias_scanner.services.impl.auth_token_service import AuthTokenService, decodeJwtPayload
from alias_scanner.services.impl.gateway_token_provider import GatewayTokenProvider
from alias_scanner.services.impl.remote_classification_service import (
    RemoteClassificationService,
    extractAlias,
    interpretResponse
)
from alias_scanner.services.impl.alias_validation_service import AliasValidationService
from alias_scanner.services.impl.transfer_service import TransferService


__all__ = [
    "ConfigService",
    "AuthTokenService",
    "decodeJwtPayload",
    "GatewayTokenProvider",
    "RemoteClassificationService",
    "extractAlias",
    "interpretResponse",
    "AliasValidationService",
    "TransferService",
]
