# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Store Handlers.

Implementations of ProtocolSecretStore:

- SecretsManagerStore: AWS Secrets Manager via boto3
- InMemorySecretStore: dictionary-backed store for development and tests
"""

from global_secrets_manager.handlers.handler_in_memory_store import (
    InMemorySecretStore,
)
from global_secrets_manager.handlers.handler_secrets_manager import (
    SecretsManagerStore,
)

__all__: list[str] = [
    "InMemorySecretStore",
    "SecretsManagerStore",
]
