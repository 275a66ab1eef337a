# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Manager Errors Module.

Exports:
    ModelSecretErrorContext: Configuration model for bundled error context
    SecretsManagerError: Base error class
    SchemaDeclarationError: Malformed schema declaration (definition time)
    SecretResolutionCycleError: Binding accessed while resolving itself
    SecretFetchError: Base class for terminal resolution failures
    SecretNotFoundError: No store entry named after the schema
    SecretTransportError: Store unreachable or failing
    SecretAuthenticationError: Store credentials invalid or denied
    SecretStoreConfigurationError: Store configuration could not be built
    SecretParseError: Payload does not match the schema

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Secret values or raw payloads
        - Access keys, session tokens, or credential material

    SAFE to include:
        - Schema names and field names
        - Operation names (e.g., "get_secret_value", "parse")
        - Correlation IDs (always include for tracing)
        - AWS error codes (e.g., "ResourceNotFoundException")

    Example - GOOD (sanitized)::

        raise SecretParseError(
            "Secret payload field 'port' has an incompatible value",
            field="port",
            context=context,
        )
"""

from global_secrets_manager.errors.model_secret_error_context import (
    ModelSecretErrorContext,
)
from global_secrets_manager.errors.secret_errors import (
    SchemaDeclarationError,
    SecretAuthenticationError,
    SecretFetchError,
    SecretNotFoundError,
    SecretParseError,
    SecretResolutionCycleError,
    SecretsManagerError,
    SecretStoreConfigurationError,
    SecretTransportError,
)

__all__: list[str] = [
    # Configuration model
    "ModelSecretErrorContext",
    # Error classes
    "SecretsManagerError",
    "SchemaDeclarationError",
    "SecretResolutionCycleError",
    "SecretFetchError",
    "SecretNotFoundError",
    "SecretTransportError",
    "SecretAuthenticationError",
    "SecretStoreConfigurationError",
    "SecretParseError",
]
