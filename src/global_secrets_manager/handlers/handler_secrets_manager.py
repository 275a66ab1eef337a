# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""AWS Secrets Manager Store - boto3 implementation of ProtocolSecretStore.

Fetches the SecretString of the entry whose name equals the requested key and
maps botocore failures onto the secret error taxonomy.

Security Features:
    - Credentials held as SecretStr in config (never logged or exposed)
    - Sanitized error messages (AWS error codes only, never payloads)
    - Secret values are never logged at any level

Error Mapping:
    ResourceNotFoundException -> SecretNotFoundError
    Access denied / invalid, expired or missing credentials -> SecretAuthenticationError
    Any other ClientError or BotoCoreError -> SecretTransportError
    Entry stored as SecretBinary only -> SecretParseError
    Invalid region/profile while building the client -> SecretStoreConfigurationError

Timeouts and retries belong to the botocore client and are configured through
ModelSecretsManagerConfig (connect/read timeouts, max_attempts).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
)

from global_secrets_manager.enums import EnumSecretTransportType
from global_secrets_manager.errors import (
    ModelSecretErrorContext,
    SecretAuthenticationError,
    SecretNotFoundError,
    SecretParseError,
    SecretStoreConfigurationError,
    SecretTransportError,
)
from global_secrets_manager.models import ModelSecretsManagerConfig
from global_secrets_manager.models.model_secrets_manager_config import (
    DEFAULT_ENV_FILE,
)

if TYPE_CHECKING:
    from uuid import UUID

logger = logging.getLogger(__name__)

SERVICE_NAME: str = "secretsmanager"

NOT_FOUND_ERROR_CODES: frozenset[str] = frozenset({"ResourceNotFoundException"})
AUTH_ERROR_CODES: frozenset[str] = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "DecryptionFailure",
        "ExpiredToken",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "InvalidSignatureException",
        "SignatureDoesNotMatch",
        "UnrecognizedClientException",
    }
)


class SecretsManagerStore:
    """Read-only AWS Secrets Manager client.

    The boto3 client is built once in __init__ from the configuration; pass
    ``client`` to inject a pre-built (or stubbed) client instead.

    Example:
        >>> store = SecretsManagerStore.from_env()
        >>> payload = store.get_secret_string("SampleSecrets")
    """

    def __init__(
        self,
        config: ModelSecretsManagerConfig | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Store configuration (defaults to an empty config, which
                defers region and credentials to boto3's default chain)
            client: Pre-built boto3 ``secretsmanager`` client

        Raises:
            SecretStoreConfigurationError: If boto3 cannot build a client
                from the configuration (unknown profile, no region)
        """
        self._config = config or ModelSecretsManagerConfig()
        self._client = client if client is not None else self._create_client(self._config)

    @classmethod
    def from_env(
        cls, env_file: str | Path | None = DEFAULT_ENV_FILE
    ) -> SecretsManagerStore:
        """Build a store from environment variables and an optional .env file."""
        return cls(config=ModelSecretsManagerConfig.from_env(env_file=env_file))

    @property
    def config(self) -> ModelSecretsManagerConfig:
        return self._config

    def get_secret_string(self, key: str) -> str:
        """Fetch the SecretString stored under ``key``.

        Args:
            key: Exact secret name (or ARN) in AWS Secrets Manager

        Returns:
            The secret's text payload

        Raises:
            SecretNotFoundError: No secret named ``key`` exists
            SecretAuthenticationError: Credentials are missing, invalid or denied
            SecretTransportError: AWS could not be reached or failed
            SecretParseError: The secret only has a binary value
        """
        context = ModelSecretErrorContext.with_correlation(
            transport_type=EnumSecretTransportType.AWS_SECRETS_MANAGER,
            operation="get_secret_value",
            target_name=SERVICE_NAME,
        )

        try:
            response = self._client.get_secret_value(SecretId=key)
        except ClientError as e:
            self._raise_for_client_error(e, key, context)
        except (NoCredentialsError, PartialCredentialsError) as e:
            raise SecretAuthenticationError(
                "No usable AWS credentials for secret store",
                context=context,
                secret_name=key,
            ) from e
        except BotoCoreError as e:
            logger.warning(
                "Secret store request failed for secret: %s (error type: %s)",
                key,
                type(e).__name__,
                extra=self._log_extra(key, context.correlation_id),
            )
            raise SecretTransportError(
                f"Secret store request failed: {type(e).__name__}",
                context=context,
                secret_name=key,
            ) from e

        secret_string = response.get("SecretString")
        if secret_string is None:
            raise SecretParseError(
                "Secret is stored as binary; expected a text payload",
                context=context,
                secret_name=key,
            )

        logger.debug(
            "Fetched secret from AWS Secrets Manager: %s",
            key,
            extra=self._log_extra(key, context.correlation_id),
        )
        return str(secret_string)

    def _raise_for_client_error(
        self,
        error: ClientError,
        key: str,
        context: ModelSecretErrorContext,
    ) -> NoReturn:
        """Translate a botocore ClientError into the secret error taxonomy."""
        error_code = str(error.response.get("Error", {}).get("Code", "Unknown"))

        if error_code in NOT_FOUND_ERROR_CODES:
            raise SecretNotFoundError(
                "Secret not found in store",
                context=context,
                secret_name=key,
                aws_error_code=error_code,
            ) from error

        if error_code in AUTH_ERROR_CODES:
            raise SecretAuthenticationError(
                f"Secret store rejected credentials: {error_code}",
                context=context,
                secret_name=key,
                aws_error_code=error_code,
            ) from error

        logger.warning(
            "Secret store returned an error for secret: %s (code: %s)",
            key,
            error_code,
            extra={**self._log_extra(key, context.correlation_id), "aws_error_code": error_code},
        )
        raise SecretTransportError(
            f"Secret store request failed: {error_code}",
            context=context,
            secret_name=key,
            aws_error_code=error_code,
        ) from error

    @staticmethod
    def _create_client(config: ModelSecretsManagerConfig) -> Any:
        """Create a boto3 ``secretsmanager`` client from configuration."""
        session_kwargs: dict[str, str] = {}
        if config.aws_access_key_id is not None and config.aws_secret_access_key is not None:
            session_kwargs["aws_access_key_id"] = config.aws_access_key_id.get_secret_value()
            session_kwargs["aws_secret_access_key"] = (
                config.aws_secret_access_key.get_secret_value()
            )
        if config.aws_session_token is not None:
            session_kwargs["aws_session_token"] = config.aws_session_token.get_secret_value()
        if config.region_name is not None:
            session_kwargs["region_name"] = config.region_name
        if config.profile_name is not None:
            session_kwargs["profile_name"] = config.profile_name

        client_config = Config(
            connect_timeout=config.connect_timeout_seconds,
            read_timeout=config.read_timeout_seconds,
            retries={"max_attempts": config.max_attempts, "mode": "standard"},
        )

        try:
            session = boto3.session.Session(**session_kwargs)
            client = session.client(
                SERVICE_NAME,
                endpoint_url=config.endpoint_url,
                config=client_config,
            )
        except (ProfileNotFound, NoRegionError) as e:
            context = ModelSecretErrorContext.with_correlation(
                transport_type=EnumSecretTransportType.AWS_SECRETS_MANAGER,
                operation="create_client",
                target_name=SERVICE_NAME,
            )
            raise SecretStoreConfigurationError(
                f"Cannot build secret store client: {type(e).__name__}",
                context=context,
            ) from e

        logger.info(
            "Secret store client initialized",
            extra={
                "region": config.region_name or "default",
                "static_credentials": config.has_static_credentials,
                "endpoint_override": config.endpoint_url is not None,
            },
        )
        return client

    @staticmethod
    def _log_extra(key: str, correlation_id: UUID | None) -> dict[str, str]:
        return {"secret_name": key, "correlation_id": str(correlation_id)}


__all__ = ["SecretsManagerStore"]
