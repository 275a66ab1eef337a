# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Resolution State Enumeration.

Lifecycle marker for a lazily resolved secret binding. Transitions are
monotonic: UNSTARTED -> IN_PROGRESS -> DONE, with no way back.
"""

from enum import Enum


class EnumResolutionState(str, Enum):
    """Lifecycle states of a secret binding.

    Attributes:
        UNSTARTED: No caller has accessed the binding yet
        IN_PROGRESS: The first caller is fetching and parsing the secret
        DONE: Resolution finished with either a bundle or a terminal error
    """

    UNSTARTED = "unstarted"
    IN_PROGRESS = "in_progress"
    DONE = "done"


__all__ = ["EnumResolutionState"]
