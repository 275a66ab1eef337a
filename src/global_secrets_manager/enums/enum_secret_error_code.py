# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Secret Error Code Enumeration.

Stable, machine-readable codes attached to every error raised by
global_secrets_manager. Codes are safe to log and to use for alerting.
"""

from enum import Enum


class EnumSecretErrorCode(str, Enum):
    """Error classification codes.

    Attributes:
        OPERATION_FAILED: Generic failure (default for the base error)
        INVALID_DECLARATION: Malformed schema declaration
        RESOLUTION_CYCLE: A binding was accessed while resolving itself
        RESOURCE_NOT_FOUND: The store has no entry named after the schema
        TRANSPORT_ERROR: The store could not be reached or failed unexpectedly
        AUTHENTICATION_ERROR: Store credentials are missing, invalid or expired
        INVALID_CONFIGURATION: Store configuration could not be established
        PARSE_ERROR: The payload does not match the schema
    """

    OPERATION_FAILED = "OPERATION_FAILED"
    INVALID_DECLARATION = "INVALID_DECLARATION"
    RESOLUTION_CYCLE = "RESOLUTION_CYCLE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
    PARSE_ERROR = "PARSE_ERROR"


__all__ = ["EnumSecretErrorCode"]
