"""A simple first-in, first-out queue of work items."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, TypeVar

T = TypeVar("T")


class TaskQueue(Generic[T]):
    """FIFO queue used to hand items between tasks."""

    def __init__(self) -> None:
        self._elements: Deque[T] = deque()

    def add_element(self, elem: T) -> None:
        self._elements.append(elem)

    def get_element(self) -> T:
        """Remove and return the oldest item; raise IndexError when empty."""
        if not self._elements:
            raise IndexError("get_element from an empty TaskQueue")
        return self._elements.popleft()

    def empty(self) -> bool:
        return not self._elements

    def __len__(self) -> int:
        return len(self._elements)