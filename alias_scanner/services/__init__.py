# Services module for Alias Scanner
# Contains configuration and the HTTP collaborators of the scanner

# Interfaces are in services/interfaces/, implementations in services/impl/
# Import them directly from there:
# from alias_scanner.services.impl.config_service import ConfigService
# from alias_scanner.services.impl.alias_validation_service import AliasValidationService
# etc.

__all__ = []
