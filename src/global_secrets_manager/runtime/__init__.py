# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime module for global_secrets_manager.

Core Components
---------------
- **LazySecret**: single-flight, lazily resolved handle for one schema
    - Exactly one store query per schema for the process lifetime
    - Blocks (threads) or suspends (asyncio) concurrent first accessors
    - Terminal failures recorded once and replayed to every accessor

- **SecretBindingRegistry**: SINGLE SOURCE OF TRUTH for secret handles
    - Keyed by schema name, which is used verbatim as the store key
    - Declaration validation before any store interaction

- **parse_secret_payload**: JSON payload -> typed SecretBundle
"""

from __future__ import annotations

from global_secrets_manager.runtime.lazy_secret import LazySecret, StoreFactory
from global_secrets_manager.runtime.payload_parser import parse_secret_payload
from global_secrets_manager.runtime.secret_binder import (
    SecretBindingRegistry,
    bind_secret,
    configure_store,
    declare_secret,
    get_default_registry,
    global_secret,
)

__all__: list[str] = [
    "LazySecret",
    "SecretBindingRegistry",
    "StoreFactory",
    "bind_secret",
    "configure_store",
    "declare_secret",
    "get_default_registry",
    "global_secret",
    "parse_secret_payload",
]
