# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Transport Type Enumeration.

Defines the transport types a secret can be fetched through.
Used for error context and store identification.
"""

from enum import Enum


class EnumSecretTransportType(str, Enum):
    """Transport types for secret store clients.

    Attributes:
        AWS_SECRETS_MANAGER: AWS Secrets Manager over the boto3 client
        IN_MEMORY: Process-local dictionary store (development and tests)
        RUNTIME: Resolver-internal operations (binding, parsing)
    """

    AWS_SECRETS_MANAGER = "secretsmanager"
    IN_MEMORY = "memory"
    RUNTIME = "runtime"


__all__ = ["EnumSecretTransportType"]
