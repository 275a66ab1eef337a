# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Manager Enumerations Module.

Exports:
    EnumResolutionState: Lifecycle state of a lazily resolved secret binding
    EnumSecretErrorCode: Error classification codes
    EnumSecretTransportType: Transport used to reach a secret store
"""

from global_secrets_manager.enums.enum_resolution_state import EnumResolutionState
from global_secrets_manager.enums.enum_secret_error_code import EnumSecretErrorCode
from global_secrets_manager.enums.enum_secret_transport_type import (
    EnumSecretTransportType,
)

__all__: list[str] = [
    "EnumResolutionState",
    "EnumSecretErrorCode",
    "EnumSecretTransportType",
]
