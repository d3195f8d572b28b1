# ---
# File: monitor_editor/navigation.py
# Purpose: View targets the edit session can leave to, and the navigator
#          contract the hosting UI implements.
# ---

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol


class ViewKind(str, Enum):
    DETAIL = "DETAIL"
    LIST = "LIST"


@dataclass(frozen=True)
class ViewTarget:
    kind: ViewKind
    monitor_id: Optional[Any] = None

    @property
    def path(self) -> str:
        if self.kind is ViewKind.DETAIL:
            return f"/monitors/{self.monitor_id}"
        return "/monitors"


def detail_view(monitor_id: Any) -> ViewTarget:
    return ViewTarget(ViewKind.DETAIL, monitor_id)


def list_view() -> ViewTarget:
    return ViewTarget(ViewKind.LIST)


class Navigator(Protocol):
    def navigate(self, target: ViewTarget) -> None: ...
