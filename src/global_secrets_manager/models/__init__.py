# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secrets Manager Models.

This module exports the Pydantic models used across global_secrets_manager.
"""

from global_secrets_manager.models.model_secret_binding_info import (
    ModelSecretBindingInfo,
)
from global_secrets_manager.models.model_secret_bundle import (
    MASKED_VALUE,
    SecretBundle,
)
from global_secrets_manager.models.model_secret_schema import (
    FieldDeclarations,
    ModelSecretField,
    ModelSecretSchema,
    declare_schema,
)
from global_secrets_manager.models.model_secrets_manager_config import (
    ModelSecretsManagerConfig,
)

__all__: list[str] = [
    "FieldDeclarations",
    "MASKED_VALUE",
    "ModelSecretBindingInfo",
    "ModelSecretField",
    "ModelSecretSchema",
    "ModelSecretsManagerConfig",
    "SecretBundle",
    "declare_schema",
]
