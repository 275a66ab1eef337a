# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""AWS Secrets Manager Store Configuration Model.

This module provides the Pydantic configuration model for the AWS Secrets
Manager store client, and the environment loader that builds it.

Security Note:
    Credential fields use SecretStr to prevent accidental logging. They should
    come from environment variables or a local, git-ignored .env file, never
    from committed configuration.

Environment Variables:
    AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY: Static credentials (optional;
        boto3's default credential chain is used when absent)
    AWS_SESSION_TOKEN: Session token for temporary credentials
    AWS_PROFILE: Shared-credentials profile name
    AWS_REGION (fallback AWS_DEFAULT_REGION): Region of the secret store
    AWS_ENDPOINT_URL_SECRETSMANAGER: Endpoint override (e.g. LocalStack)
    SECRETS_MANAGER_CONNECT_TIMEOUT / SECRETS_MANAGER_READ_TIMEOUT: Seconds
    SECRETS_MANAGER_MAX_ATTEMPTS: botocore retry attempts

Example:
    >>> config = ModelSecretsManagerConfig.from_env()
    >>> config.aws_secret_access_key
    SecretStr('**********')
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    model_validator,
)

from global_secrets_manager.enums import EnumSecretTransportType
from global_secrets_manager.errors import (
    ModelSecretErrorContext,
    SecretStoreConfigurationError,
)

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE: str = ".env"

ENV_ACCESS_KEY_ID: str = "AWS_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY: str = "AWS_SECRET_ACCESS_KEY"
ENV_SESSION_TOKEN: str = "AWS_SESSION_TOKEN"
ENV_PROFILE: str = "AWS_PROFILE"
ENV_REGION: str = "AWS_REGION"
ENV_DEFAULT_REGION: str = "AWS_DEFAULT_REGION"
ENV_ENDPOINT_URL: str = "AWS_ENDPOINT_URL_SECRETSMANAGER"
ENV_CONNECT_TIMEOUT: str = "SECRETS_MANAGER_CONNECT_TIMEOUT"
ENV_READ_TIMEOUT: str = "SECRETS_MANAGER_READ_TIMEOUT"
ENV_MAX_ATTEMPTS: str = "SECRETS_MANAGER_MAX_ATTEMPTS"


class ModelSecretsManagerConfig(BaseModel):
    """Configuration for the AWS Secrets Manager store client.

    Attributes:
        region_name: AWS region (None defers to boto3's own resolution)
        aws_access_key_id: Static access key ID (SecretStr, optional)
        aws_secret_access_key: Static secret access key (SecretStr, optional)
        aws_session_token: Session token for temporary credentials (optional)
        profile_name: Shared-credentials profile (optional)
        endpoint_url: Endpoint override, e.g. for LocalStack (optional)
        connect_timeout_seconds: Socket connect timeout (0.1-300.0, default 5.0)
        read_timeout_seconds: Socket read timeout (0.1-300.0, default 30.0)
        max_attempts: botocore retry attempts including the first (1-10, default 3)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    region_name: str | None = Field(
        default=None,
        description="AWS region of the secret store",
    )
    aws_access_key_id: SecretStr | None = Field(
        default=None,
        description="Static access key ID",
    )
    aws_secret_access_key: SecretStr | None = Field(
        default=None,
        description="Static secret access key",
    )
    aws_session_token: SecretStr | None = Field(
        default=None,
        description="Session token for temporary credentials",
    )
    profile_name: str | None = Field(
        default=None,
        description="Shared-credentials profile name",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Secrets Manager endpoint override",
    )
    connect_timeout_seconds: float = Field(
        default=5.0,
        ge=0.1,
        le=300.0,
        description="Socket connect timeout in seconds",
    )
    read_timeout_seconds: float = Field(
        default=30.0,
        ge=0.1,
        le=300.0,
        description="Socket read timeout in seconds",
    )
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="botocore retry attempts, including the first call",
    )

    @model_validator(mode="after")
    def _check_static_credentials_pair(self) -> ModelSecretsManagerConfig:
        if (self.aws_access_key_id is None) != (self.aws_secret_access_key is None):
            raise ValueError(
                "aws_access_key_id and aws_secret_access_key must be set together"
            )
        return self

    @property
    def has_static_credentials(self) -> bool:
        return self.aws_access_key_id is not None

    @classmethod
    def from_env(
        cls,
        env_file: str | Path | None = DEFAULT_ENV_FILE,
        environ: Mapping[str, str] | None = None,
    ) -> ModelSecretsManagerConfig:
        """Build configuration from the environment and an optional .env file.

        Values already present in the environment take precedence over the
        .env file. Empty values are treated as unset.

        Args:
            env_file: Path of a dotenv file to read, or None to skip it.
                A missing file is not an error.
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Validated ModelSecretsManagerConfig

        Raises:
            SecretStoreConfigurationError: If the values fail validation.
                The message lists offending field names only, never values.
        """
        values: dict[str, str] = {}
        if env_file is not None and Path(env_file).is_file():
            values.update(
                {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            )
            logger.debug(
                "Loaded secret store settings from dotenv file",
                extra={"env_file": str(env_file)},
            )
        values.update(os.environ if environ is None else environ)

        def lookup(*names: str) -> str | None:
            for name in names:
                value = values.get(name)
                if value:
                    return value
            return None

        raw: dict[str, object] = {
            "region_name": lookup(ENV_REGION, ENV_DEFAULT_REGION),
            "aws_access_key_id": lookup(ENV_ACCESS_KEY_ID),
            "aws_secret_access_key": lookup(ENV_SECRET_ACCESS_KEY),
            "aws_session_token": lookup(ENV_SESSION_TOKEN),
            "profile_name": lookup(ENV_PROFILE),
            "endpoint_url": lookup(ENV_ENDPOINT_URL),
        }
        for field_name, env_name in (
            ("connect_timeout_seconds", ENV_CONNECT_TIMEOUT),
            ("read_timeout_seconds", ENV_READ_TIMEOUT),
            ("max_attempts", ENV_MAX_ATTEMPTS),
        ):
            env_value = lookup(env_name)
            if env_value is not None:
                raw[field_name] = env_value

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            # Only locations are reported; pydantic messages echo input values.
            invalid_fields = sorted(
                {".".join(str(part) for part in err["loc"]) or "config" for err in e.errors()}
            )
            context = ModelSecretErrorContext.with_correlation(
                transport_type=EnumSecretTransportType.AWS_SECRETS_MANAGER,
                operation="load_config",
                target_name="secretsmanager",
            )
            raise SecretStoreConfigurationError(
                f"Invalid secret store configuration: {', '.join(invalid_fields)}",
                context=context,
            ) from None


__all__ = ["ModelSecretsManagerConfig"]
