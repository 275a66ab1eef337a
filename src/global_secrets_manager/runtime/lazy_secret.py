# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Lazy, single-flight secret binding.

LazySecret owns the resolution state of one schema and mediates every access
to its bundle. The first access fetches the store entry named after the
schema, parses it, and records the outcome; every other access, concurrent
or later, observes that same outcome.

State Machine:
    UNSTARTED --first access--> IN_PROGRESS --fetch+parse ok--> DONE(bundle)
                                      \\--fetch or parse fails--> DONE(error)

Thread Safety:
    A ``threading.Lock`` guards the transition to DONE. Callers arriving while
    the state is IN_PROGRESS block on the lock, then re-check the state and
    read the stored outcome; none of them issues a fetch of its own. Once the
    state is DONE, reads take no lock: the outcome never changes again.

    Async callers use ``get_async()``, which returns immediately when DONE and
    otherwise waits on the same lock from a worker thread
    (``asyncio.to_thread``). Threads, tasks on any event loop, and mixed sync
    and async callers therefore share a single fetch.

Error Policy:
    Failures are raised as typed SecretFetchError subclasses rather than
    aborting the process. The first failure is terminal: the identical
    exception instance is raised to every later caller, and the store is
    never queried again.

    Because the instance is shared, each raise resets its ``__traceback__``
    to the one captured at resolution, so tracebacks do not accumulate
    across calls. Callers on different threads still share the instance:
    its ``__traceback__`` and ``__context__`` reflect whichever raise ran
    last. Use ``error_code``, ``context`` and ``correlation_id`` rather than
    the traceback to report a replayed failure.

Example:
    >>> handle = LazySecret(schema, store_factory=SecretsManagerStore.from_env)
    >>> handle.key1          # first access fetches and parses
    'value1'
    >>> handle.get().key2    # no further store queries
    'value2'
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID, uuid4

from global_secrets_manager.enums import EnumResolutionState, EnumSecretTransportType
from global_secrets_manager.errors import (
    ModelSecretErrorContext,
    SchemaDeclarationError,
    SecretFetchError,
    SecretParseError,
    SecretResolutionCycleError,
    SecretStoreConfigurationError,
    SecretTransportError,
)
from global_secrets_manager.models import (
    ModelSecretBindingInfo,
    ModelSecretSchema,
    SecretBundle,
)
from global_secrets_manager.protocols import ProtocolSecretStore
from global_secrets_manager.runtime.payload_parser import parse_secret_payload

logger = logging.getLogger(__name__)

BundleT = TypeVar("BundleT", bound=SecretBundle)
StoreFactory = Callable[[], ProtocolSecretStore]


class LazySecret(Generic[BundleT]):
    """Process-wide handle bound to one schema's eventual bundle.

    Field values are read straight off the handle (``handle.key1``) or from
    the bundle returned by ``get()``. The handle exposes no mutation entry
    point; the bundle itself is frozen.

    Attributes:
        key: Store lookup key (the schema name, verbatim)
        schema: The bound schema descriptor
        state: Current resolution state
    """

    def __init__(
        self,
        schema: ModelSecretSchema,
        store_factory: StoreFactory,
    ) -> None:
        """Initialize an unresolved handle. No store interaction happens here.

        Args:
            schema: Validated schema descriptor
            store_factory: Callable building the store client; called once,
                inside resolution, so configuration and credentials are
                acquired on first access

        Raises:
            SchemaDeclarationError: If a schema field would be shadowed by a
                handle attribute (e.g. a field named ``state``)
        """
        shadowed = [name for name in schema.field_names if hasattr(type(self), name)]
        if shadowed:
            raise SchemaDeclarationError(
                f"Secret schema '{schema.name}' field names collide with handle "
                f"attributes: {', '.join(shadowed)}",
                context=ModelSecretErrorContext(
                    transport_type=EnumSecretTransportType.RUNTIME,
                    operation="bind",
                    target_name="lazy_secret",
                ),
                schema_name=schema.name,
            )

        init = object.__setattr__
        init(self, "_schema", schema)
        init(self, "_store_factory", store_factory)
        init(self, "_lock", threading.Lock())
        init(self, "_state", EnumResolutionState.UNSTARTED)
        init(self, "_bundle", None)
        init(self, "_error", None)
        init(self, "_error_traceback", None)
        init(self, "_fetch_count", 0)
        init(self, "_resolved_at", None)
        init(self, "_resolving_thread", None)

    # === Access ===

    def get(self) -> BundleT:
        """Return the resolved bundle, resolving it on first access.

        Blocks while another thread is resolving. After resolution returns
        without locking or touching the store.

        Returns:
            The bundle; the same instance for every caller

        Raises:
            SecretFetchError: The terminal resolution failure (same instance
                on every call)
            SecretResolutionCycleError: Called from inside this handle's own
                resolution (e.g. by its store factory)
        """
        if self._state is EnumResolutionState.DONE:
            return self._outcome()

        if self._resolving_thread == threading.get_ident():
            raise SecretResolutionCycleError(
                f"Secret '{self.key}' was accessed while it was being resolved",
                context=self._context("get"),
                secret_name=self.key,
            )

        with self._lock:
            if self._state is not EnumResolutionState.DONE:
                self._resolve_locked()

        return self._outcome()

    async def get_async(self) -> BundleT:
        """Async variant of get(); never blocks the event loop.

        Returns:
            The bundle; the same instance sync callers receive

        Raises:
            SecretFetchError: The terminal resolution failure
        """
        if self._state is EnumResolutionState.DONE:
            return self._outcome()
        return await asyncio.to_thread(self.get)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names the handle itself does not define.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.get(), name)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"Secret handle '{self.key}' is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Secret handle '{self.key}' is read-only")

    def __repr__(self) -> str:
        return f"LazySecret(key={self.key!r}, state={self._state.value})"

    # === Introspection (non-sensitive) ===

    @property
    def key(self) -> str:
        return self._schema.key

    @property
    def schema(self) -> ModelSecretSchema:
        return self._schema

    @property
    def state(self) -> EnumResolutionState:
        return self._state

    @property
    def is_resolved(self) -> bool:
        """True once resolution finished successfully."""
        return self._state is EnumResolutionState.DONE and self._error is None

    @property
    def fetch_count(self) -> int:
        return self._fetch_count

    def get_binding_info(self) -> ModelSecretBindingInfo:
        """Return a snapshot of this binding that never exposes secret values."""
        error = self._error
        return ModelSecretBindingInfo(
            schema_name=self.key,
            field_names=self._schema.field_names,
            state=self._state,
            fetch_count=self._fetch_count,
            resolved_at=self._resolved_at,
            error_type=type(error).__name__ if error is not None else None,
        )

    # === Internal Methods ===

    def _outcome(self) -> BundleT:
        # Re-raise with the traceback captured at resolution, not the last raise.
        if self._error is not None:
            raise self._error.with_traceback(self._error_traceback)
        return self._bundle

    def _resolve_locked(self) -> None:
        """Run fetch-and-parse once and record the outcome. Caller holds _lock."""
        correlation_id = uuid4()
        self._set("_state", EnumResolutionState.IN_PROGRESS)
        self._set("_resolving_thread", threading.get_ident())

        logger.info(
            "Resolving secret: %s",
            self.key,
            extra={"secret_name": self.key, "correlation_id": str(correlation_id)},
        )

        try:
            bundle = self._fetch_and_parse(correlation_id)
        except SecretFetchError as e:
            self._set("_error", e)
            self._set("_error_traceback", e.__traceback__)
            logger.warning(
                "Secret resolution failed: %s (error type: %s)",
                self.key,
                type(e).__name__,
                extra={
                    "secret_name": self.key,
                    "error_code": e.error_code.value,
                    "correlation_id": str(correlation_id),
                },
            )
        except BaseException:
            # _fetch_and_parse maps every Exception onto SecretFetchError, so
            # only interpreter-level interrupts (KeyboardInterrupt, SystemExit)
            # reach here, before any outcome existed.
            self._set("_resolving_thread", None)
            self._set("_state", EnumResolutionState.UNSTARTED)
            raise
        else:
            self._set("_bundle", bundle)
            logger.info(
                "Secret resolved: %s",
                self.key,
                extra={
                    "secret_name": self.key,
                    "field_count": len(self._schema.fields),
                    "correlation_id": str(correlation_id),
                },
            )

        self._set("_resolved_at", datetime.now(UTC))
        self._set("_resolving_thread", None)
        self._set("_state", EnumResolutionState.DONE)

    def _fetch_and_parse(self, correlation_id: UUID) -> BundleT:
        """Acquire the store, fetch the raw payload, and parse it.

        Any non-taxonomy exception is wrapped so that the recorded outcome is
        always a SecretFetchError.
        """
        try:
            store = self._store_factory()
        except SecretFetchError:
            raise
        except Exception as e:
            raise SecretStoreConfigurationError(
                f"Secret store could not be initialized: {type(e).__name__}",
                context=self._context("create_store", correlation_id),
                secret_name=self.key,
            ) from e

        self._set("_fetch_count", self._fetch_count + 1)
        try:
            raw = store.get_secret_string(self.key)
        except SecretFetchError:
            raise
        except Exception as e:
            raise SecretTransportError(
                f"Secret store failed unexpectedly: {type(e).__name__}",
                context=self._context("get_secret_string", correlation_id),
                secret_name=self.key,
            ) from e

        try:
            return parse_secret_payload(
                raw,
                self._schema.bundle_type,
                context=self._context("parse", correlation_id),
            )
        except SecretFetchError:
            raise
        except Exception as e:
            # Validator errors may echo payload values; not chained.
            raise SecretParseError(
                f"Secret payload could not be parsed: {type(e).__name__}",
                context=self._context("parse", correlation_id),
                secret_name=self.key,
            ) from None

    def _context(
        self, operation: str, correlation_id: UUID | None = None
    ) -> ModelSecretErrorContext:
        return ModelSecretErrorContext.with_correlation(
            correlation_id=correlation_id,
            transport_type=EnumSecretTransportType.RUNTIME,
            operation=operation,
            target_name=self.key,
        )

    def _set(self, name: str, value: object) -> None:
        object.__setattr__(self, name, value)


__all__: list[str] = ["BundleT", "LazySecret", "StoreFactory"]
