# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret payload parsing.

Converts a raw structured-text payload (a JSON object of string keys) into a
schema's SecretBundle type using standard pydantic validation:

- every declared field must be present with a compatible value
- unknown payload keys are ignored
- the first offending field (in declaration order) is reported

Neither pydantic nor json errors are chained into the raised SecretParseError,
because both carry the offending input, which here is secret material.
"""

from __future__ import annotations

import json
from typing import TypeVar

from pydantic import ValidationError

from global_secrets_manager.errors import ModelSecretErrorContext, SecretParseError
from global_secrets_manager.models import SecretBundle

BundleT = TypeVar("BundleT", bound=SecretBundle)


def parse_secret_payload(
    raw: str | bytes,
    bundle_type: type[BundleT],
    context: ModelSecretErrorContext | None = None,
) -> BundleT:
    """Parse a raw payload into ``bundle_type``.

    Args:
        raw: JSON text as returned by the secret store
        bundle_type: SecretBundle subclass describing the schema
        context: Error context to attach to parse failures

    Returns:
        A frozen bundle owning copies of the field values

    Raises:
        SecretParseError: Payload is not text or not a JSON object, or a
            declared field is missing or has an incompatible value (``field`` names it)
    """
    if not isinstance(raw, (str, bytes, bytearray)):
        raise SecretParseError(
            f"Secret payload must be text, got {type(raw).__name__}",
            context=context,
            schema_name=bundle_type.__name__,
        )

    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise SecretParseError(
            "Secret payload is not valid JSON",
            context=context,
            schema_name=bundle_type.__name__,
        ) from None

    if not isinstance(payload, dict):
        raise SecretParseError(
            f"Secret payload must be a JSON object, got {type(payload).__name__}",
            context=context,
            schema_name=bundle_type.__name__,
        )

    try:
        return bundle_type.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        location = first.get("loc", ())
        field = str(location[0]) if location else None
        if first.get("type") == "missing":
            message = f"Secret payload is missing required field '{field}'"
        else:
            message = f"Secret payload field '{field}' has an incompatible value"
        raise SecretParseError(
            message,
            field=field,
            context=context,
            schema_name=bundle_type.__name__,
            error_count=e.error_count(),
        ) from None


__all__ = ["parse_secret_payload"]
