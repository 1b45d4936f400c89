"""Navigation history: which screen to restore on "back".

The stack always holds at least the root globe entry. Pushes are never
de-duplicated: pushing the same screen twice means "back" undoes one step
at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)


class Screen(str, Enum):
    GLOBE = "globe"
    HOME = "home"
    PROJECT_LIST = "project_list"
    PROJECT_DETAIL = "project_detail"
    SETTINGS = "settings"


@dataclass(frozen=True)
class NavEntry:
    screen: Screen
    payload: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "screen", Screen(self.screen))

    def to_dict(self) -> dict:
        return {"screen": self.screen.value, "payload": self.payload}


ROOT_ENTRY = NavEntry(Screen.GLOBE)


class NavHistory:
    def __init__(self) -> None:
        self._entries: list[NavEntry] = [ROOT_ENTRY]

    def push(self, entry: NavEntry) -> None:
        self._entries.append(entry)
        logger.debug("Navigate to %s (depth %d)", entry.screen.value, len(self._entries))

    def navigate(self, screen: Screen | str, payload: Any = None) -> NavEntry:
        entry = NavEntry(screen, payload)
        self.push(entry)
        return entry

    def pop(self) -> Optional[NavEntry]:
        """Go back one step.

        Returns the entry now on top, which the caller must restore
        (including any nested state carried in its payload), or None when
        already at the root.
        """
        if len(self._entries) <= 1:
            return None
        self._entries.pop()
        return self._entries[-1]

    def current(self) -> NavEntry:
        return self._entries[-1]

    def reset(self) -> None:
        self._entries = [ROOT_ENTRY]

    @property
    def entries(self) -> tuple[NavEntry, ...]:
        return tuple(self._entries)

    @property
    def can_go_back(self) -> bool:
        return len(self._entries) > 1

    def __len__(self) -> int:
        return len(self._entries)
