# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Global Secrets Manager - typed, lazily resolved secrets from AWS Secrets Manager.

Declare a schema whose name matches a Secrets Manager entry and read its keys
from anywhere in the process. The entry is fetched once, on first access, no
matter how many threads or tasks ask for it concurrently.

Key Components:
    - SecretBundle: Base class for schema declarations (frozen pydantic model)
    - global_secret / bind_secret / declare_secret: Schema binding helpers
    - LazySecret: The process-wide, single-flight handle
    - SecretsManagerStore: boto3 client, configured from the environment/.env
    - Typed errors: SchemaDeclarationError and SecretFetchError subclasses

Example:
    >>> from global_secrets_manager import SecretBundle, global_secret
    >>>
    >>> @global_secret
    ... class SampleSecrets(SecretBundle):
    ...     key1: str
    ...     key2: str
    >>>
    >>> SampleSecrets.key1
    'value1'
"""

from global_secrets_manager.errors import (
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
from global_secrets_manager.handlers import InMemorySecretStore, SecretsManagerStore
from global_secrets_manager.models import (
    ModelSecretsManagerConfig,
    ModelSecretSchema,
    SecretBundle,
    declare_schema,
)
from global_secrets_manager.runtime import (
    LazySecret,
    SecretBindingRegistry,
    bind_secret,
    configure_store,
    declare_secret,
    get_default_registry,
    global_secret,
)

__all__: list[str] = [
    # Declaration
    "SecretBundle",
    "ModelSecretSchema",
    "declare_schema",
    "global_secret",
    "bind_secret",
    "declare_secret",
    # Resolution
    "LazySecret",
    "SecretBindingRegistry",
    "get_default_registry",
    "configure_store",
    # Stores
    "InMemorySecretStore",
    "SecretsManagerStore",
    "ModelSecretsManagerConfig",
    # Errors
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
