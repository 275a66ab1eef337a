# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol for Secret Store Clients.

The resolver depends only on this interface: a store answers one question,
"what is the raw text stored under this exact key". Transport, region and
authentication are the implementation's concern.

Example:
    >>> class DictStore:
    ...     def __init__(self, entries: dict[str, str]) -> None:
    ...         self._entries = entries
    ...
    ...     def get_secret_string(self, key: str) -> str:
    ...         try:
    ...             return self._entries[key]
    ...         except KeyError:
    ...             raise SecretNotFoundError("Secret not found in store") from None
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProtocolSecretStore(Protocol):
    """Read-only secret store keyed by exact entry name."""

    def get_secret_string(self, key: str) -> str:
        """Return the raw payload stored under ``key``.

        Args:
            key: Exact store entry name (the schema name, untransformed)

        Returns:
            Raw structured-text payload (a JSON object)

        Raises:
            SecretNotFoundError: No entry named ``key`` exists
            SecretAuthenticationError: Credentials are missing, invalid or denied
            SecretTransportError: The store could not be reached
        """
        ...


__all__ = ["ProtocolSecretStore"]
