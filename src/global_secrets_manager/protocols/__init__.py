# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Manager Protocols.

Exports:
    ProtocolSecretStore: Read-only secret store interface used by LazySecret
"""

from global_secrets_manager.protocols.protocol_secret_store import (
    ProtocolSecretStore,
)

__all__: list[str] = ["ProtocolSecretStore"]
