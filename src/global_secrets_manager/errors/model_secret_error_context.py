# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Error Context Configuration Model.

This module defines the configuration model for secret error context,
encapsulating common structured fields to reduce __init__ parameter count
while keeping strong typing.
"""

from __future__ import annotations

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from global_secrets_manager.enums import EnumSecretTransportType


class ModelSecretErrorContext(BaseModel):
    """Configuration model for secret error context.

    Attributes:
        transport_type: Transport the failing operation used
        operation: Operation being performed (bind, get_secret_value, parse, ...)
        target_name: Target store or component name
        correlation_id: Correlation ID for tracing one resolution attempt

    Example:
        >>> context = ModelSecretErrorContext.with_correlation(
        ...     transport_type=EnumSecretTransportType.AWS_SECRETS_MANAGER,
        ...     operation="get_secret_value",
        ...     target_name="secretsmanager",
        ... )
        >>> raise SecretTransportError("Secret store unreachable", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    transport_type: EnumSecretTransportType | None = Field(
        default=None,
        description="Transport used by the failing operation",
    )
    operation: str | None = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: str | None = Field(
        default=None,
        description="Target store or component name",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Correlation ID for tracing",
    )

    @classmethod
    def with_correlation(
        cls,
        correlation_id: UUID | None = None,
        **kwargs: object,
    ) -> ModelSecretErrorContext:
        """Create a context, generating a UUID4 correlation ID when none is given.

        Args:
            correlation_id: Existing correlation ID to propagate, if any
            **kwargs: Remaining context fields

        Returns:
            ModelSecretErrorContext with a correlation ID set
        """
        return cls(correlation_id=correlation_id or uuid4(), **kwargs)


__all__ = ["ModelSecretErrorContext"]
