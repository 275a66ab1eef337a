# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pytest configuration and shared fixtures for global_secrets_manager tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from global_secrets_manager.handlers import InMemorySecretStore
from global_secrets_manager.runtime import SecretBindingRegistry, get_default_registry

SAMPLE_PAYLOAD: dict[str, str] = {"key1": "value1", "key2": "value2"}


@pytest.fixture
def sample_store() -> InMemorySecretStore:
    """Store holding a ``SampleSecrets`` entry with two string keys."""
    return InMemorySecretStore({"SampleSecrets": SAMPLE_PAYLOAD})


@pytest.fixture
def registry() -> SecretBindingRegistry:
    """Fresh, isolated registry (never touches AWS)."""
    return SecretBindingRegistry(store_factory=InMemorySecretStore)


@pytest.fixture(autouse=True)
def reset_default_registry() -> Generator[None, None, None]:
    """Keep the process-wide registry empty and unconfigured between tests."""
    default_registry = get_default_registry()
    default_registry.clear()
    default_registry.configure_store(None)
    yield
    default_registry.clear()
    default_registry.configure_store(None)
