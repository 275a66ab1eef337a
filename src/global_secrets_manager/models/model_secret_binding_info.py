# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Binding Introspection Model.

Non-sensitive snapshot of a LazySecret handle, safe for debugging output and
health endpoints. Never carries secret values.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from global_secrets_manager.enums import EnumResolutionState


class ModelSecretBindingInfo(BaseModel):
    """Introspection data for one secret binding.

    Attributes:
        schema_name: Schema identity and store key
        field_names: Declared field names in order
        state: Current resolution state
        fetch_count: Number of store queries issued (0 or 1)
        resolved_at: When resolution finished, if it has
        error_type: Class name of the terminal error, if resolution failed
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    schema_name: str = Field(description="Schema identity and store key")
    field_names: tuple[str, ...] = Field(description="Declared field names")
    state: EnumResolutionState = Field(description="Current resolution state")
    fetch_count: int = Field(default=0, ge=0, description="Store queries issued")
    resolved_at: datetime | None = Field(
        default=None,
        description="Time resolution reached DONE",
    )
    error_type: str | None = Field(
        default=None,
        description="Terminal error class name, when resolution failed",
    )

    @property
    def is_failed(self) -> bool:
        return self.error_type is not None


__all__ = ["ModelSecretBindingInfo"]
