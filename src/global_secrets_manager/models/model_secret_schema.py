# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Schema Descriptor Model.

A schema is a named, ordered set of (field name, field type) pairs. Its name
is the exact key the secret store is queried with: no prefixing, case folding
or namespace handling is applied, so store entries MUST be named identically
to the schema.

Schemas are declared in one of two ways:

    From a SecretBundle subclass (name is the class name without its module
    path)::

        class SampleSecrets(SecretBundle):
            key1: str
            key2: str

        schema = ModelSecretSchema.from_bundle_type(SampleSecrets)

    From an explicit descriptor (the bundle type is generated)::

        schema = declare_schema("SampleSecrets", [("key1", str), ("key2", str)])

Both paths raise SchemaDeclarationError for malformed declarations before any
store interaction can happen.
"""

from __future__ import annotations

import keyword
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, create_model

from global_secrets_manager.enums import EnumSecretTransportType
from global_secrets_manager.errors import (
    ModelSecretErrorContext,
    SchemaDeclarationError,
)
from global_secrets_manager.models.model_secret_bundle import SecretBundle

FieldDeclarations = Mapping[str, Any] | Sequence[tuple[str, Any]]


class ModelSecretField(BaseModel):
    """One declared field of a secret schema.

    Attributes:
        name: Field name, equal to the payload key it is read from
        annotation: Python type the payload value must be compatible with
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    name: str = Field(description="Field name and payload key")
    annotation: Any = Field(description="Declared field type")


class ModelSecretSchema(BaseModel):
    """Named, field-typed schema bound to a bundle type.

    Attributes:
        name: Schema identity and verbatim store lookup key
        fields: Declared fields in declaration order
        bundle_type: SecretBundle subclass the payload is parsed into
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    name: str = Field(description="Schema name, used verbatim as the store key")
    fields: tuple[ModelSecretField, ...] = Field(description="Declared fields")
    bundle_type: type[SecretBundle] = Field(description="Generated or declared bundle type")

    @property
    def key(self) -> str:
        """Store lookup key (identical to the schema name)."""
        return self.name

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def is_compatible_with(self, other: ModelSecretSchema) -> bool:
        """Return True when both schemas declare the same fields and types."""
        return self.name == other.name and [
            (f.name, f.annotation) for f in self.fields
        ] == [(f.name, f.annotation) for f in other.fields]

    @classmethod
    def from_bundle_type(cls, bundle_type: type[SecretBundle]) -> ModelSecretSchema:
        """Describe a SecretBundle subclass as a schema.

        Args:
            bundle_type: A SecretBundle subclass declaring at least one field

        Returns:
            ModelSecretSchema named after the class (without module path)

        Raises:
            SchemaDeclarationError: If the type is not a SecretBundle subclass,
                declares no fields, or declares an unusable field name
        """
        if not isinstance(bundle_type, type) or not issubclass(
            bundle_type, SecretBundle
        ):
            raise SchemaDeclarationError(
                "Secret schemas must subclass SecretBundle",
                context=_declaration_context(),
                declared_type=repr(bundle_type),
            )
        if bundle_type is SecretBundle:
            raise SchemaDeclarationError(
                "SecretBundle itself cannot be bound; declare a subclass",
                context=_declaration_context(),
            )

        name = bundle_type.__name__
        fields = [
            (field_name, field_info.annotation)
            for field_name, field_info in bundle_type.model_fields.items()
        ]
        _validate_declaration(name, fields)

        return cls(
            name=name,
            fields=tuple(
                ModelSecretField(name=field_name, annotation=annotation)
                for field_name, annotation in fields
            ),
            bundle_type=bundle_type,
        )


def declare_schema(name: str, fields: FieldDeclarations) -> ModelSecretSchema:
    """Declare a schema from an explicit name and field descriptor.

    Args:
        name: Schema name; also the exact store entry name
        fields: Ordered (field name, type) pairs, or a mapping of them

    Returns:
        ModelSecretSchema with a generated SecretBundle subclass named ``name``

    Raises:
        SchemaDeclarationError: If the name is empty, there are no fields,
            field names repeat or are not usable attribute names, or a field
            type cannot be validated
    """
    pairs = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
    _validate_declaration(name, pairs)

    try:
        bundle_type = create_model(
            name,
            __base__=SecretBundle,
            **{field_name: (annotation, ...) for field_name, annotation in pairs},
        )
    except (TypeError, NameError, ValueError) as e:
        raise SchemaDeclarationError(
            f"Secret schema field types are not usable: {type(e).__name__}",
            context=_declaration_context(),
            schema_name=name,
        ) from e

    return ModelSecretSchema(
        name=name,
        fields=tuple(
            ModelSecretField(name=field_name, annotation=annotation)
            for field_name, annotation in pairs
        ),
        bundle_type=bundle_type,
    )


def _declaration_context() -> ModelSecretErrorContext:
    return ModelSecretErrorContext(
        transport_type=EnumSecretTransportType.RUNTIME,
        operation="declare_schema",
        target_name="secret_binder",
    )


def _validate_declaration(name: str, fields: Sequence[tuple[str, Any]]) -> None:
    """Check name and field list rules shared by both declaration paths."""
    if not isinstance(name, str) or not name.strip():
        raise SchemaDeclarationError(
            "Secret schema name must be a non-empty string",
            context=_declaration_context(),
        )

    if not fields:
        raise SchemaDeclarationError(
            f"Secret schema '{name}' declares no fields",
            context=_declaration_context(),
            schema_name=name,
        )

    seen: set[str] = set()
    for entry in fields:
        if not isinstance(entry, tuple) or len(entry) != 2:
            raise SchemaDeclarationError(
                f"Secret schema '{name}' fields must be (name, type) pairs",
                context=_declaration_context(),
                schema_name=name,
            )
        field_name = entry[0]
        if not isinstance(field_name, str) or not _is_usable_field_name(field_name):
            raise SchemaDeclarationError(
                f"Secret schema '{name}' declares unusable field name {field_name!r}",
                context=_declaration_context(),
                schema_name=name,
                field=str(field_name),
            )
        if field_name in seen:
            raise SchemaDeclarationError(
                f"Secret schema '{name}' declares duplicate field '{field_name}'",
                context=_declaration_context(),
                schema_name=name,
                field=field_name,
            )
        seen.add(field_name)


def _is_usable_field_name(field_name: str) -> bool:
    # Leading underscores are private attributes in pydantic; BaseModel
    # attributes (model_dump, json, ...) cannot be shadowed by fields.
    return (
        field_name.isidentifier()
        and not keyword.iskeyword(field_name)
        and not field_name.startswith("_")
        and not field_name.startswith("model_")
        and not hasattr(SecretBundle, field_name)
    )


__all__ = [
    "FieldDeclarations",
    "ModelSecretField",
    "ModelSecretSchema",
    "declare_schema",
]
