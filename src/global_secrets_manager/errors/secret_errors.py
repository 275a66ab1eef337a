# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Manager Error Classes.

Error Hierarchy:
    SecretsManagerError (base error)
    ├── SchemaDeclarationError
    ├── SecretResolutionCycleError
    └── SecretFetchError (terminal resolution failures)
        ├── SecretNotFoundError
        ├── SecretTransportError
        ├── SecretAuthenticationError
        ├── SecretStoreConfigurationError
        └── SecretParseError

All errors:
    - Carry an EnumSecretErrorCode for classification
    - Support proper error chaining with `raise ... from e`
    - Accept ModelSecretErrorContext for bundled context parameters
    - Never include secret values in messages or context

SecretFetchError subclasses are recorded by a LazySecret as the terminal
state of its binding and re-raised to every subsequent caller.
"""

from __future__ import annotations

from uuid import UUID

from global_secrets_manager.enums import EnumSecretErrorCode
from global_secrets_manager.errors.model_secret_error_context import (
    ModelSecretErrorContext,
)


class SecretsManagerError(Exception):
    """Base error class for global_secrets_manager.

    Structured Fields (via ModelSecretErrorContext):
        transport_type: Transport the failing operation used
        operation: Operation being performed
        correlation_id: Correlation ID for tracing
        target_name: Target store or component name

    Example:
        >>> context = ModelSecretErrorContext(
        ...     operation="bind",
        ...     target_name="secret_binder",
        ... )
        >>> raise SecretsManagerError("Operation failed", context=context)
    """

    default_error_code: EnumSecretErrorCode = EnumSecretErrorCode.OPERATION_FAILED

    def __init__(
        self,
        message: str,
        error_code: EnumSecretErrorCode | None = None,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize SecretsManagerError with structured fields.

        Args:
            message: Human-readable error message (no secret values)
            error_code: Error code (defaults to the class default)
            context: Bundled context (transport_type, operation, etc.)
            **extra_context: Additional non-sensitive context information
        """
        structured_context: dict[str, object] = dict(extra_context)

        correlation_id: UUID | None = None
        if context is not None:
            if context.transport_type is not None:
                structured_context["transport_type"] = context.transport_type
            if context.operation is not None:
                structured_context["operation"] = context.operation
            if context.target_name is not None:
                structured_context["target_name"] = context.target_name
            correlation_id = context.correlation_id

        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.correlation_id = correlation_id
        self.context = structured_context

    def __str__(self) -> str:
        details = f"{self.message} [error_code={self.error_code.value}]"
        if self.correlation_id is not None:
            details += f" (correlation_id={self.correlation_id})"
        return details


class SchemaDeclarationError(SecretsManagerError):
    """Raised when a secret schema declaration is malformed.

    Surfaced at definition time, before any store interaction: empty name,
    zero fields, duplicate field names, unusable field names, or a name
    already bound to a different schema.

    Example:
        >>> raise SchemaDeclarationError(
        ...     "Secret schema declares duplicate field 'key1'",
        ...     schema_name="SampleSecrets",
        ...     field="key1",
        ... )
    """

    default_error_code = EnumSecretErrorCode.INVALID_DECLARATION


class SecretResolutionCycleError(SecretsManagerError):
    """Raised when a binding is accessed from inside its own resolution.

    This is a programming error. Raised inside a store factory it becomes
    the cause of the SecretStoreConfigurationError recorded for the binding.
    """

    default_error_code = EnumSecretErrorCode.RESOLUTION_CYCLE


class SecretFetchError(SecretsManagerError):
    """Base class for terminal resolution failures.

    Once a LazySecret records one of these, the identical instance is
    re-raised to every past and future accessor; no retry is attempted.
    """

    default_error_code = EnumSecretErrorCode.OPERATION_FAILED


class SecretNotFoundError(SecretFetchError):
    """Raised when the store has no entry named after the schema.

    Example:
        >>> context = ModelSecretErrorContext.with_correlation(
        ...     transport_type=EnumSecretTransportType.AWS_SECRETS_MANAGER,
        ...     operation="get_secret_value",
        ... )
        >>> raise SecretNotFoundError(
        ...     "Secret not found in store",
        ...     context=context,
        ...     secret_name="SampleSecrets",
        ... )
    """

    default_error_code = EnumSecretErrorCode.RESOURCE_NOT_FOUND


class SecretTransportError(SecretFetchError):
    """Raised when the store is unreachable or fails unexpectedly."""

    default_error_code = EnumSecretErrorCode.TRANSPORT_ERROR


class SecretAuthenticationError(SecretFetchError):
    """Raised when store credentials are missing, invalid, expired or denied."""

    default_error_code = EnumSecretErrorCode.AUTHENTICATION_ERROR


class SecretStoreConfigurationError(SecretFetchError):
    """Raised when the store client configuration cannot be established.

    Used for invalid environment values or a store factory that fails before
    any request is sent.
    """

    default_error_code = EnumSecretErrorCode.INVALID_CONFIGURATION


class SecretParseError(SecretFetchError):
    """Raised when the raw payload does not match the schema.

    Attributes:
        field: Name of the first offending field, or None when the payload
            as a whole is unusable (invalid JSON, not an object, binary only)

    Example:
        >>> raise SecretParseError(
        ...     "Secret payload is missing required field 'key2'",
        ...     field="key2",
        ... )
    """

    default_error_code = EnumSecretErrorCode.PARSE_ERROR

    def __init__(
        self,
        message: str,
        field: str | None = None,
        context: ModelSecretErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize SecretParseError.

        Args:
            message: Human-readable error message (no secret values)
            field: Offending field name, if the failure is field-specific
            context: Bundled context
            **extra_context: Additional non-sensitive context information
        """
        if field is not None:
            extra_context["field"] = field
        super().__init__(message, context=context, **extra_context)
        self.field = field


__all__: list[str] = [
    "SchemaDeclarationError",
    "SecretAuthenticationError",
    "SecretFetchError",
    "SecretNotFoundError",
    "SecretParseError",
    "SecretResolutionCycleError",
    "SecretStoreConfigurationError",
    "SecretTransportError",
    "SecretsManagerError",
]
