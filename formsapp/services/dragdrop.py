"""Pointer-driven reordering of a list of item ids.

The controller knows nothing about pointer libraries: callers feed it
pointer-down, pointer-move, pointer-up and cancel events and it keeps a live
preview ordering, committing the final move through a callback.
"""

import logging
import math
import time
from enum import Enum
from typing import Callable, Mapping, Sequence

from formsapp.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def array_move(items: Sequence, from_index: int, to_index: int) -> list:
    """Move one element, keeping the relative order of all others."""
    moved = list(items)
    if not (0 <= from_index < len(moved)) or not (0 <= to_index < len(moved)):
        raise IndexError(f"cannot move {from_index} -> {to_index} in a list of {len(moved)}")
    moved.insert(to_index, moved.pop(from_index))
    return moved


def closest_center(point: Point, centers: Mapping[str, Point]) -> str | None:
    """Id of the item whose center is nearest to the point; ties go to the first."""
    best_id, best_distance = None, math.inf
    for item_id, center in centers.items():
        distance = math.dist(point, center)
        if distance < best_distance:
            best_id, best_distance = item_id, distance
    return best_id


class DragController:
    def __init__(
        self,
        get_items: Callable[[], list[str]],
        on_commit: Callable[[int, int], None],
        flash_duration: float = 0.6,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._get_items = get_items
        self._on_commit = on_commit
        self._flash_duration = flash_duration
        self._clock = clock
        self.state = DragState.IDLE
        self.active_id: str | None = None
        self._origin: list[str] = []
        self._centers: dict[str, Point] = {}
        self._preview: list[str] = []
        self._flash_index: int | None = None
        self._flash_until = 0.0

    @property
    def preview(self) -> list[str]:
        """Ordering to display: the live preview while dragging, else the real order."""
        if self.state == DragState.DRAGGING:
            return list(self._preview)
        return list(self._get_items())

    @property
    def flash_index(self) -> int | None:
        if self._flash_index is not None and self._clock() >= self._flash_until:
            self._flash_index = None
        return self._flash_index

    def is_dragging(self, item_id: str) -> bool:
        return self.state == DragState.DRAGGING and item_id == self.active_id

    def pointer_down(self, item_id: str, centers: Mapping[str, Point]) -> None:
        if self.state == DragState.DRAGGING:
            raise ValidationError(f"Already dragging {self.active_id}")
        items = list(self._get_items())
        if item_id not in items:
            raise NotFoundError(f"No question with id {item_id}")
        self.state = DragState.DRAGGING
        self.active_id = item_id
        self._origin = items
        self._preview = list(items)
        self._centers = {i: centers[i] for i in items if i in centers}

    def pointer_move(self, point: Point) -> list[str]:
        if self.state != DragState.DRAGGING:
            return self.preview
        over_id = closest_center(point, self._centers)
        if over_id is not None:
            self._preview = array_move(
                self._origin, self._origin.index(self.active_id), self._origin.index(over_id),
            )
        return list(self._preview)

    def pointer_up(self) -> int | None:
        """Finish the gesture. Returns the item's new index, or None if nothing moved.

        A drop is cancelled when the item list changed since pointer-down.
        """
        if self.state != DragState.DRAGGING:
            return None
        if list(self._get_items()) != self._origin:
            logger.warning("Items changed while dragging %s; drop cancelled", self.active_id)
            self._reset()
            return None
        from_index = self._origin.index(self.active_id)
        to_index = self._preview.index(self.active_id)
        self._reset()
        if from_index == to_index:
            return None
        self._on_commit(from_index, to_index)
        self._flash_index = to_index
        self._flash_until = self._clock() + self._flash_duration
        logger.debug("Dropped item %s -> %s", from_index, to_index)
        return to_index

    def cancel(self) -> None:
        if self.state == DragState.DRAGGING:
            logger.debug("Drag of %s cancelled", self.active_id)
        self._reset()

    def _reset(self) -> None:
        self.state = DragState.IDLE
        self.active_id = None
        self._origin = []
        self._preview = []
        self._centers = {}
