"""
Gateway infrastructure exceptions.

Errors raised at the boundary with external collaborators (router, token,
state store) and by configuration loading.
"""
from typing import Optional


class GatewayError(Exception):
    """Base exception for gateway infrastructure errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        """
        Args:
            message: Error message
            error_code: Machine-readable error code (optional)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ExternalAdapterFailure(GatewayError):
    """An external adapter call failed or reported failure."""

    def __init__(self, adapter: str, operation: str, reason: str):
        """
        Args:
            adapter: Adapter name (e.g. 'router', 'token')
            operation: Operation that failed (e.g. 'approve')
            reason: Failure reason as reported by the adapter
        """
        message = f"External adapter failure ({adapter}.{operation}): {reason}"
        super().__init__(message, error_code="EXTERNAL_ADAPTER_FAILURE")
        self.adapter = adapter
        self.operation = operation
        self.reason = reason


class ConfigurationError(GatewayError):
    """Invalid configuration value."""

    def __init__(self, config_key: str, reason: str):
        """
        Args:
            config_key: Configuration key
            reason: Why the value is invalid
        """
        message = f"Configuration error ({config_key}): {reason}"
        super().__init__(message, error_code="CONFIGURATION_ERROR")
        self.config_key = config_key
        self.reason = reason


class PersistenceError(GatewayError):
    """State store read or write failed."""

    def __init__(self, operation: str, reason: str):
        """
        Args:
            operation: Persistence operation (e.g. 'load', 'save')
            reason: Failure reason
        """
        message = f"Persistence error ({operation}): {reason}"
        super().__init__(message, error_code="PERSISTENCE_ERROR")
        self.operation = operation
        self.reason = reason


class DeploymentError(GatewayError):
    """Gateway used before deployment, or deployed twice."""

    def __init__(self, reason: str):
        super().__init__(f"Deployment error: {reason}", error_code="DEPLOYMENT_ERROR")
        self.reason = reason
