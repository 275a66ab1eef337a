# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""In-Memory Secret Store - dictionary-backed ProtocolSecretStore.

Intended for local development and tests. Entries are fixed at construction;
mapping values are serialized to JSON so they behave like AWS SecretString
payloads. Every lookup is counted per key, which makes exactly-once fetch
behaviour observable.
"""

from __future__ import annotations

import json
import threading
import time
from collections import defaultdict
from collections.abc import Mapping

from global_secrets_manager.enums import EnumSecretTransportType
from global_secrets_manager.errors import ModelSecretErrorContext, SecretNotFoundError


class InMemorySecretStore:
    """Process-local secret store.

    Example:
        >>> store = InMemorySecretStore({"SampleSecrets": {"key1": "value1"}})
        >>> store.get_secret_string("SampleSecrets")
        '{"key1": "value1"}'
        >>> store.call_count("SampleSecrets")
        1
    """

    def __init__(
        self,
        entries: Mapping[str, str | Mapping[str, object]] | None = None,
        latency_seconds: float = 0.0,
    ) -> None:
        """Initialize the store.

        Args:
            entries: Secret name -> raw text payload, or a mapping that is
                serialized to a JSON object
            latency_seconds: Artificial delay per lookup, to simulate a
                remote round trip
        """
        self._entries: dict[str, str] = {
            name: value if isinstance(value, str) else json.dumps(dict(value))
            for name, value in (entries or {}).items()
        }
        self._latency_seconds = latency_seconds
        self._calls: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def get_secret_string(self, key: str) -> str:
        """Return the payload stored under ``key``.

        Raises:
            SecretNotFoundError: No entry named exactly ``key``
        """
        with self._lock:
            self._calls[key] += 1

        if self._latency_seconds > 0:
            time.sleep(self._latency_seconds)

        try:
            return self._entries[key]
        except KeyError:
            context = ModelSecretErrorContext.with_correlation(
                transport_type=EnumSecretTransportType.IN_MEMORY,
                operation="get_secret_string",
                target_name="in_memory_store",
            )
            raise SecretNotFoundError(
                "Secret not found in store",
                context=context,
                secret_name=key,
            ) from None

    def call_count(self, key: str) -> int:
        with self._lock:
            return self._calls.get(key, 0)

    @property
    def total_calls(self) -> int:
        with self._lock:
            return sum(self._calls.values())


__all__ = ["InMemorySecretStore"]
