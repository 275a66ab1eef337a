# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Binding Registry - SINGLE SOURCE OF TRUTH for secret handles.

This module binds secret schemas to process-wide LazySecret handles, keyed by
schema name. The schema name is the exact store entry name: no prefixing,
case folding or namespacing.

Design Principles:
- One slot per schema identity: binding a name twice returns the same handle
- Declaration errors surface at bind time, before any store interaction
- Thread-safe: registration protected by a lock
- Late store configuration: handles declared at import time resolve their
  store factory on first access, so ``configure_store()`` can still redirect
  them (for example to an InMemorySecretStore in tests)

Example Usage:
    Declarative form (the class name becomes the handle)::

        @global_secret
        class SampleSecrets(SecretBundle):
            key1: str
            key2: str

        SampleSecrets.key1        # fetches "SampleSecrets" once, then "value1"

    Descriptor form::

        twitter = declare_secret(
            "my_secrets",
            [("twitter_api_key", str), ("twitter_api_secret", str)],
        )
        twitter.get().twitter_api_key

    Indexed access::

        registry = get_default_registry()
        handle = registry["SampleSecrets"]
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, overload

from global_secrets_manager.enums import EnumSecretTransportType
from global_secrets_manager.errors import (
    ModelSecretErrorContext,
    SchemaDeclarationError,
)
from global_secrets_manager.handlers import SecretsManagerStore
from global_secrets_manager.models import (
    FieldDeclarations,
    ModelSecretSchema,
    SecretBundle,
    declare_schema,
)
from global_secrets_manager.protocols import ProtocolSecretStore
from global_secrets_manager.runtime.lazy_secret import BundleT, LazySecret, StoreFactory

logger = logging.getLogger(__name__)


class SecretBindingRegistry:
    """Thread-safe registry of secret handles keyed by schema name.

    Attributes:
        _bindings: Schema name -> LazySecret handle
        _explicit_factories: Schema name -> store factory passed at first bind
        _store_factory: Default store factory for handles bound without one
        _lock: Threading lock for registration operations
    """

    def __init__(self, store_factory: StoreFactory | None = None) -> None:
        """Initialize an empty registry.

        Args:
            store_factory: Default store factory; None means
                ``SecretsManagerStore.from_env`` (AWS, configured from the
                environment and .env on first access)
        """
        self._bindings: dict[str, LazySecret[Any]] = {}
        self._explicit_factories: dict[str, StoreFactory | None] = {}
        self._store_factory = store_factory
        self._lock = threading.Lock()

    def configure_store(self, store_factory: StoreFactory | None) -> None:
        """Set the default store factory used by handles bound without one.

        Affects every such handle that has not started resolving yet.
        """
        with self._lock:
            self._store_factory = store_factory

    @overload
    def bind(
        self,
        declaration: type[BundleT],
        store_factory: StoreFactory | None = None,
    ) -> LazySecret[BundleT]: ...

    @overload
    def bind(
        self,
        declaration: ModelSecretSchema,
        store_factory: StoreFactory | None = None,
    ) -> LazySecret[Any]: ...

    def bind(
        self,
        declaration: type[SecretBundle] | ModelSecretSchema,
        store_factory: StoreFactory | None = None,
    ) -> LazySecret[Any]:
        """Bind a schema to its process-wide handle.

        Args:
            declaration: SecretBundle subclass or schema descriptor
            store_factory: Store factory for this handle only; None uses the
                registry default at resolution time

        Returns:
            The handle for the schema's name. Re-binding a compatible schema
            (same name, same fields and types) returns the existing handle;
            a different store_factory passed on re-bind is ignored with a
            warning, since the handle may already be resolved.

        Raises:
            SchemaDeclarationError: If the declaration is malformed, or the
                name is already bound to a different schema
        """
        schema = (
            declaration
            if isinstance(declaration, ModelSecretSchema)
            else ModelSecretSchema.from_bundle_type(declaration)
        )

        with self._lock:
            existing = self._bindings.get(schema.name)
            if existing is not None:
                if not existing.schema.is_compatible_with(schema):
                    raise SchemaDeclarationError(
                        f"Secret schema name '{schema.name}' is already bound "
                        "to a different schema",
                        context=ModelSecretErrorContext(
                            transport_type=EnumSecretTransportType.RUNTIME,
                            operation="bind",
                            target_name="secret_binder",
                        ),
                        schema_name=schema.name,
                    )
                if (
                    store_factory is not None
                    and store_factory is not self._explicit_factories.get(schema.name)
                ):
                    logger.warning(
                        "Secret schema already bound; ignoring new store factory: %s",
                        schema.name,
                        extra={"schema_name": schema.name},
                    )
                return existing

            handle: LazySecret[Any] = LazySecret(
                schema,
                store_factory=(
                    store_factory
                    if store_factory is not None
                    else self._create_default_store
                ),
            )
            self._bindings[schema.name] = handle
            self._explicit_factories[schema.name] = store_factory

        logger.debug(
            "Bound secret schema: %s",
            schema.name,
            extra={"schema_name": schema.name, "field_count": len(schema.fields)},
        )
        return handle

    def declare(
        self,
        name: str,
        fields: FieldDeclarations,
        store_factory: StoreFactory | None = None,
    ) -> LazySecret[Any]:
        """Declare a schema from a name and field descriptor, then bind it."""
        return self.bind(declare_schema(name, fields), store_factory=store_factory)

    def get(self, name: str) -> LazySecret[Any] | None:
        with self._lock:
            return self._bindings.get(name)

    def list_keys(self) -> list[str]:
        """Return bound schema names, sorted."""
        with self._lock:
            return sorted(self._bindings)

    def clear(self) -> None:
        """Drop every binding. Intended for test isolation only."""
        with self._lock:
            self._bindings.clear()
            self._explicit_factories.clear()

    def __getitem__(self, name: str) -> LazySecret[Any]:
        handle = self.get(name)
        if handle is None:
            raise KeyError(name)
        return handle

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._bindings

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    def _create_default_store(self) -> ProtocolSecretStore:
        with self._lock:
            factory = self._store_factory
        if factory is None:
            return SecretsManagerStore.from_env()
        return factory()


_default_registry = SecretBindingRegistry()


def get_default_registry() -> SecretBindingRegistry:
    """Return the process-wide registry used by the module-level helpers."""
    return _default_registry


def configure_store(store_factory: StoreFactory | None) -> None:
    """Set the default store factory of the process-wide registry."""
    _default_registry.configure_store(store_factory)


def bind_secret(
    declaration: type[BundleT],
    store_factory: StoreFactory | None = None,
) -> LazySecret[BundleT]:
    """Bind a SecretBundle subclass in the process-wide registry."""
    return _default_registry.bind(declaration, store_factory=store_factory)


def declare_secret(
    name: str,
    fields: FieldDeclarations,
    store_factory: StoreFactory | None = None,
) -> LazySecret[Any]:
    """Declare and bind a schema in the process-wide registry."""
    return _default_registry.declare(name, fields, store_factory=store_factory)


@overload
def global_secret(cls: type[BundleT]) -> LazySecret[BundleT]: ...


@overload
def global_secret(
    cls: None = None,
    *,
    registry: SecretBindingRegistry | None = None,
    store_factory: StoreFactory | None = None,
) -> Callable[[type[BundleT]], LazySecret[BundleT]]: ...


def global_secret(
    cls: type[BundleT] | None = None,
    *,
    registry: SecretBindingRegistry | None = None,
    store_factory: StoreFactory | None = None,
) -> LazySecret[BundleT] | Callable[[type[BundleT]], LazySecret[BundleT]]:
    """Class decorator replacing a SecretBundle subclass with its handle.

    The decorated name becomes the process-wide handle, resolved lazily on
    first attribute access::

        @global_secret
        class SampleSecrets(SecretBundle):
            key1: str

        SampleSecrets.key1

    Args:
        cls: The class, when used without parentheses
        registry: Registry to bind in (defaults to the process-wide one)
        store_factory: Store factory for this handle only

    Raises:
        SchemaDeclarationError: If the class is not a valid schema
    """
    target = registry if registry is not None else _default_registry

    def decorate(bundle_type: type[BundleT]) -> LazySecret[BundleT]:
        return target.bind(bundle_type, store_factory=store_factory)

    if cls is None:
        return decorate
    return decorate(cls)


__all__: list[str] = [
    "SecretBindingRegistry",
    "bind_secret",
    "configure_store",
    "declare_secret",
    "get_default_registry",
    "global_secret",
]
