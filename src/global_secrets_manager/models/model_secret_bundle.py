# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Bundle Base Model.

SecretBundle is the base class for every schema's resolved value. Subclass it
to declare a schema whose name matches the store entry::

    class SampleSecrets(SecretBundle):
        key1: str
        key2: str

Instances are frozen, ignore payload keys the schema does not declare, and
mask their field values in repr()/str() so a bundle that ends up in a log
line does not leak secret material.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

MASKED_VALUE: str = "**********"


class SecretBundle(BaseModel):
    """Immutable, type-checked container for resolved secret fields.

    Field values are read through normal attribute access. Mutation raises a
    pydantic ValidationError because the model is frozen.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    def __repr_args__(self) -> Iterator[tuple[str | None, object]]:
        for name, _value in super().__repr_args__():
            yield name, MASKED_VALUE


__all__ = ["MASKED_VALUE", "SecretBundle"]
