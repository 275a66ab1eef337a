# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for LazySecret.

Test Coverage:
- Exactly one store query under concurrent first access (threads and asyncio)
- Every caller observes the same bundle instance
- Terminal failures replayed as the same exception instance
- Store factory and store failures wrapped into the error taxonomy
- Re-entrant access detection
- Read-only handle and attribute delegation
- Non-sensitive introspection
"""

from __future__ import annotations

import asyncio
import threading
import traceback
from unittest.mock import MagicMock

import pytest
from pydantic import field_validator

from global_secrets_manager.enums import EnumResolutionState
from global_secrets_manager.errors import (
    SchemaDeclarationError,
    SecretFetchError,
    SecretNotFoundError,
    SecretParseError,
    SecretResolutionCycleError,
    SecretStoreConfigurationError,
    SecretTransportError,
)
from global_secrets_manager.handlers import InMemorySecretStore
from global_secrets_manager.models import (
    ModelSecretSchema,
    SecretBundle,
    declare_schema,
)
from global_secrets_manager.protocols import ProtocolSecretStore
from global_secrets_manager.runtime import LazySecret

pytestmark = pytest.mark.unit


class SampleSecrets(SecretBundle):
    key1: str
    key2: str


class StrictSecrets(SecretBundle):
    key1: str
    key2: str

    @field_validator("key1")
    @classmethod
    def reject_key1(cls, value: str) -> str:
        # TypeError is not converted into a pydantic ValidationError.
        raise TypeError("unsupported key1 format")


SAMPLE_SCHEMA = ModelSecretSchema.from_bundle_type(SampleSecrets)


def make_handle(store: ProtocolSecretStore) -> LazySecret[SampleSecrets]:
    return LazySecret(SAMPLE_SCHEMA, store_factory=lambda: store)


class TestLazySecretResolution:
    """Basic resolution behaviour."""

    def test_no_store_interaction_at_construction(self) -> None:
        factory = MagicMock()
        handle: LazySecret[SampleSecrets] = LazySecret(SAMPLE_SCHEMA, factory)

        factory.assert_not_called()
        assert handle.state is EnumResolutionState.UNSTARTED
        assert handle.fetch_count == 0

    def test_get_returns_parsed_bundle(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        bundle = handle.get()

        assert isinstance(bundle, SampleSecrets)
        assert bundle.key1 == "value1"
        assert bundle.key2 == "value2"
        assert handle.state is EnumResolutionState.DONE
        assert handle.is_resolved is True

    def test_queries_store_with_schema_name(self) -> None:
        store = MagicMock()
        store.get_secret_string.return_value = '{"key1":"a","key2":"b"}'
        handle = make_handle(store)

        handle.get()

        store.get_secret_string.assert_called_once_with("SampleSecrets")

    def test_repeated_access_is_idempotent(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        first = handle.get()
        for _ in range(5):
            assert handle.get() is first
            assert handle.key1 == "value1"

        assert sample_store.call_count("SampleSecrets") == 1
        assert handle.fetch_count == 1

    def test_store_factory_called_once(
        self, sample_store: InMemorySecretStore
    ) -> None:
        factory = MagicMock(return_value=sample_store)
        handle: LazySecret[SampleSecrets] = LazySecret(SAMPLE_SCHEMA, factory)

        handle.get()
        handle.get()

        factory.assert_called_once_with()

    def test_descriptor_declared_schema(
        self, sample_store: InMemorySecretStore
    ) -> None:
        schema = declare_schema("SampleSecrets", [("key1", str), ("key2", str)])
        handle: LazySecret[SecretBundle] = LazySecret(
            schema, store_factory=lambda: sample_store
        )

        assert handle.key2 == "value2"


class TestLazySecretConcurrency:
    """Single-flight behaviour under concurrent first access."""

    def test_concurrent_threads_fetch_once(self) -> None:
        store = InMemorySecretStore(
            {"SampleSecrets": {"key1": "value1", "key2": "value2"}},
            latency_seconds=0.05,
        )
        handle = make_handle(store)
        thread_count = 16
        barrier = threading.Barrier(thread_count)
        results: list[SampleSecrets] = []
        errors: list[Exception] = []
        results_lock = threading.Lock()

        def access() -> None:
            barrier.wait()
            try:
                bundle = handle.get()
            except Exception as e:
                with results_lock:
                    errors.append(e)
                return
            with results_lock:
                results.append(bundle)

        threads = [threading.Thread(target=access) for _ in range(thread_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(results) == thread_count
        assert all(bundle is results[0] for bundle in results)
        assert store.call_count("SampleSecrets") == 1
        assert handle.fetch_count == 1

    def test_concurrent_attribute_access_fetches_once(self) -> None:
        store = InMemorySecretStore(
            {"SampleSecrets": {"key1": "value1", "key2": "value2"}},
            latency_seconds=0.05,
        )
        handle = make_handle(store)
        thread_count = 8
        barrier = threading.Barrier(thread_count)
        values: list[str] = []
        values_lock = threading.Lock()

        def access() -> None:
            barrier.wait()
            value = handle.key2
            with values_lock:
                values.append(value)

        threads = [threading.Thread(target=access) for _ in range(thread_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert values == ["value2"] * thread_count
        assert store.total_calls == 1

    def test_concurrent_threads_share_failure(self) -> None:
        store = InMemorySecretStore(latency_seconds=0.05)
        handle = make_handle(store)
        thread_count = 8
        barrier = threading.Barrier(thread_count)
        errors: list[Exception] = []
        errors_lock = threading.Lock()

        def access() -> None:
            barrier.wait()
            try:
                handle.get()
            except SecretFetchError as e:
                with errors_lock:
                    errors.append(e)

        threads = [threading.Thread(target=access) for _ in range(thread_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == thread_count
        assert all(e is errors[0] for e in errors)
        assert isinstance(errors[0], SecretNotFoundError)
        assert store.call_count("SampleSecrets") == 1

    @pytest.mark.asyncio
    async def test_concurrent_tasks_fetch_once(self) -> None:
        store = InMemorySecretStore(
            {"SampleSecrets": {"key1": "value1", "key2": "value2"}},
            latency_seconds=0.05,
        )
        handle = make_handle(store)

        results = await asyncio.gather(*(handle.get_async() for _ in range(20)))

        assert all(bundle is results[0] for bundle in results)
        assert results[0].key1 == "value1"
        assert store.call_count("SampleSecrets") == 1

    @pytest.mark.asyncio
    async def test_async_and_sync_callers_share_bundle(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        from_async = await handle.get_async()

        assert handle.get() is from_async
        assert await handle.get_async() is from_async
        assert sample_store.call_count("SampleSecrets") == 1


class TestLazySecretFailures:
    """Terminal failure semantics."""

    def test_not_found_replayed_without_second_query(self) -> None:
        store = InMemorySecretStore()
        handle = make_handle(store)

        with pytest.raises(SecretNotFoundError) as first:
            handle.get()
        with pytest.raises(SecretNotFoundError) as second:
            handle.get()

        assert first.value is second.value
        assert store.call_count("SampleSecrets") == 1
        assert handle.state is EnumResolutionState.DONE
        assert handle.is_resolved is False

    @pytest.mark.asyncio
    async def test_async_access_replays_failure(self) -> None:
        store = InMemorySecretStore()
        handle = make_handle(store)

        with pytest.raises(SecretNotFoundError) as first:
            await handle.get_async()
        with pytest.raises(SecretNotFoundError) as second:
            await handle.get_async()

        assert first.value is second.value
        assert store.call_count("SampleSecrets") == 1

    def test_parse_failure_is_terminal(self) -> None:
        store = InMemorySecretStore({"SampleSecrets": {"key1": "value1"}})
        handle = make_handle(store)

        with pytest.raises(SecretParseError) as exc_info:
            handle.get()

        assert exc_info.value.field == "key2"
        with pytest.raises(SecretParseError):
            _ = handle.key1
        assert store.call_count("SampleSecrets") == 1

    def test_store_factory_failure_wrapped(self) -> None:
        def broken_factory() -> ProtocolSecretStore:
            raise RuntimeError("cannot build client")

        handle: LazySecret[SampleSecrets] = LazySecret(SAMPLE_SCHEMA, broken_factory)

        with pytest.raises(SecretStoreConfigurationError) as exc_info:
            handle.get()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert handle.fetch_count == 0
        with pytest.raises(SecretStoreConfigurationError):
            handle.get()

    def test_store_factory_taxonomy_error_kept(self) -> None:
        error = SecretStoreConfigurationError("Invalid secret store configuration")

        def failing_factory() -> ProtocolSecretStore:
            raise error

        handle: LazySecret[SampleSecrets] = LazySecret(SAMPLE_SCHEMA, failing_factory)

        with pytest.raises(SecretStoreConfigurationError) as exc_info:
            handle.get()

        assert exc_info.value is error

    def test_unexpected_store_error_wrapped(self) -> None:
        store = MagicMock()
        store.get_secret_string.side_effect = OSError("connection reset")
        handle = make_handle(store)

        with pytest.raises(SecretTransportError) as exc_info:
            handle.get()

        assert isinstance(exc_info.value.__cause__, OSError)
        assert exc_info.value.context["secret_name"] == "SampleSecrets"

    def test_interrupt_leaves_handle_unstarted(
        self, sample_store: InMemorySecretStore
    ) -> None:
        calls: list[int] = []

        def interrupted_once() -> ProtocolSecretStore:
            calls.append(1)
            if len(calls) == 1:
                raise KeyboardInterrupt
            return sample_store

        handle: LazySecret[SampleSecrets] = LazySecret(SAMPLE_SCHEMA, interrupted_once)

        with pytest.raises(KeyboardInterrupt):
            handle.get()
        assert handle.state is EnumResolutionState.UNSTARTED

        assert handle.get().key1 == "value1"

    def test_validator_type_error_is_terminal_parse_error(self) -> None:
        store = InMemorySecretStore(
            {"StrictSecrets": {"key1": "value1", "key2": "value2"}}
        )
        handle: LazySecret[StrictSecrets] = LazySecret(
            ModelSecretSchema.from_bundle_type(StrictSecrets),
            store_factory=lambda: store,
        )

        errors: list[SecretParseError] = []
        for _ in range(3):
            with pytest.raises(SecretParseError) as exc_info:
                handle.get()
            errors.append(exc_info.value)

        assert all(e is errors[0] for e in errors)
        assert "TypeError" in errors[0].message
        assert "value1" not in str(errors[0])
        assert errors[0].__cause__ is None
        assert store.call_count("StrictSecrets") == 1
        assert handle.state is EnumResolutionState.DONE
        assert handle.fetch_count == 1

    def test_non_text_payload_is_terminal_parse_error(self) -> None:
        store = MagicMock()
        store.get_secret_string.return_value = None
        handle = make_handle(store)

        for _ in range(3):
            with pytest.raises(SecretParseError):
                handle.get()

        assert store.get_secret_string.call_count == 1
        assert handle.state is EnumResolutionState.DONE
        assert handle.get_binding_info().error_type == "SecretParseError"

    def test_replayed_traceback_does_not_accumulate(self) -> None:
        handle = make_handle(InMemorySecretStore())

        with pytest.raises(SecretNotFoundError) as first:
            handle.get()
        first_depth = len(traceback.extract_tb(first.tb))
        with pytest.raises(SecretNotFoundError) as second:
            handle.get()
        with pytest.raises(SecretNotFoundError) as third:
            handle.get()

        assert second.value is first.value
        assert len(traceback.extract_tb(second.tb)) == first_depth
        assert len(traceback.extract_tb(third.tb)) == first_depth


class TestLazySecretReentrancy:
    """Access from inside the handle's own resolution."""

    def test_store_factory_reading_own_handle(self) -> None:
        holder: list[LazySecret[SampleSecrets]] = []

        def self_referencing_factory() -> ProtocolSecretStore:
            holder[0].get()
            raise AssertionError("unreachable")

        handle: LazySecret[SampleSecrets] = LazySecret(
            SAMPLE_SCHEMA, self_referencing_factory
        )
        holder.append(handle)

        with pytest.raises(SecretStoreConfigurationError) as exc_info:
            handle.get()

        assert isinstance(exc_info.value.__cause__, SecretResolutionCycleError)
        assert handle.state is EnumResolutionState.DONE


class TestLazySecretHandle:
    """Attribute delegation, immutability and introspection."""

    def test_handle_is_read_only(self, sample_store: InMemorySecretStore) -> None:
        handle = make_handle(sample_store)

        with pytest.raises(AttributeError, match="read-only"):
            handle.key1 = "changed"  # type: ignore[misc]
        with pytest.raises(AttributeError, match="read-only"):
            del handle.key1

        assert handle.key1 == "value1"

    def test_unknown_attribute_raises_after_resolution(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        with pytest.raises(AttributeError):
            _ = handle.not_a_field

    def test_private_attribute_does_not_resolve(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        assert not hasattr(handle, "_not_defined")
        assert sample_store.total_calls == 0

    def test_field_shadowing_handle_attribute_rejected(self) -> None:
        schema = declare_schema("Conflicting", [("state", str), ("token", str)])

        with pytest.raises(SchemaDeclarationError) as exc_info:
            LazySecret(schema, store_factory=InMemorySecretStore)

        assert "state" in str(exc_info.value)

    def test_repr_never_shows_values(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)
        handle.get()

        rendered = repr(handle)
        assert "SampleSecrets" in rendered
        assert "done" in rendered
        assert "value1" not in rendered

    def test_binding_info_before_and_after(
        self, sample_store: InMemorySecretStore
    ) -> None:
        handle = make_handle(sample_store)

        before = handle.get_binding_info()
        assert before.state is EnumResolutionState.UNSTARTED
        assert before.fetch_count == 0
        assert before.resolved_at is None

        handle.get()

        after = handle.get_binding_info()
        assert after.schema_name == "SampleSecrets"
        assert after.field_names == ("key1", "key2")
        assert after.state is EnumResolutionState.DONE
        assert after.fetch_count == 1
        assert after.resolved_at is not None
        assert after.is_failed is False

    def test_binding_info_records_failure_type(self) -> None:
        handle = make_handle(InMemorySecretStore())

        with pytest.raises(SecretNotFoundError):
            handle.get()

        info = handle.get_binding_info()
        assert info.is_failed is True
        assert info.error_type == "SecretNotFoundError"
