"""Shared state handed to every task."""

from __future__ import annotations

from typing import Any, Optional

from .board_finder import BoardConfig
from .display import Display
from .task_manager import TaskManager


class System:
    """Holds the board and user configuration, scheduler and display."""

    def __init__(self, display: Optional[Display] = None) -> None:
        self.board_config: Optional[BoardConfig] = None
        self.user_config: Any = None
        self._task_manager = TaskManager()
        self._display = display if display is not None else Display()
        self._is_wifi_eth_connected = False

    @property
    def task_manager(self) -> TaskManager:
        return self._task_manager

    @property
    def display(self) -> Display:
        return self._display

    @property
    def is_wifi_eth_connected(self) -> bool:
        return self._is_wifi_eth_connected

    def connected_via_wifi_eth(self, status: bool) -> None:
        self._is_wifi_eth_connected = bool(status)