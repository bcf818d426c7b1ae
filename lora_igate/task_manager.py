"""Cooperative tasks, their scheduler and the status page listing them."""

from __future__ import annotations

import abc
import enum
import logging
from typing import TYPE_CHECKING, Iterable, List

from .bitmap import Bitmap
from .display import DisplayFrame

if TYPE_CHECKING:
    from .system import System

log = logging.getLogger(__name__)


class TaskDisplayState(enum.Enum):
    ERROR = "Error"
    WARNING = "Warning"
    OKAY = "Okay"


class Task(abc.ABC):
    """A unit of work set up once and then looped by the scheduler."""

    def __init__(self, name: str, task_id: int) -> None:
        self._name = name
        self._task_id = task_id
        self.state = TaskDisplayState.OKAY
        self.state_info = "Booting"

    @property
    def name(self) -> str:
        return self._name

    @property
    def task_id(self) -> int:
        return self._task_id

    @abc.abstractmethod
    def setup(self, system: "System") -> bool:
        """Prepare the task."""

    @abc.abstractmethod
    def loop(self, system: "System") -> bool:
        """Do one step of work."""


class TaskManager:
    """Runs always-run tasks every loop and the other tasks round robin."""

    def __init__(self) -> None:
        self._tasks: List[Task] = []
        self._always_run_tasks: List[Task] = []
        self._next_task = 0

    def add_task(self, task: Task) -> None:
        self._tasks.append(task)

    def add_always_run_task(self, task: Task) -> None:
        self._always_run_tasks.append(task)

    def get_tasks(self) -> List[Task]:
        return list(self._tasks)

    def setup(self, system: "System") -> bool:
        log.debug("will setup all tasks...")
        for task in (*self._always_run_tasks, *self._tasks):
            log.debug("call setup from %s", task.name)
            task.setup(system)
        self._next_task = 0
        return True

    def loop(self, system: "System") -> bool:
        """Loop every always-run task, then the next scheduled task."""
        for task in self._always_run_tasks:
            task.loop(system)
        if not self._tasks:
            raise RuntimeError("no tasks to schedule")
        if self._next_task >= len(self._tasks):
            self._next_task = 0
        task = self._tasks[self._next_task]
        self._next_task += 1
        return task.loop(system)


class StatusFrame(DisplayFrame):
    """Lists each task with its state, one line per task."""

    def __init__(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    @staticmethod
    def _short_name(name: str) -> str:
        index = name.find("Task")
        return name if index == -1 else name[:index]

    def draw_status_page(self, bitmap: Bitmap) -> None:
        if bitmap.font is None:
            raise ValueError("no font set on this bitmap")
        y = 0
        for task in self._tasks:
            x = bitmap.draw_string(0, y, self._short_name(task.name))
            x = bitmap.draw_string(x, y, ": ")
            if task.state_info == "":
                if task.state in (TaskDisplayState.ERROR, TaskDisplayState.WARNING):
                    bitmap.draw_string(x, y, task.state.value)
                bitmap.draw_string(x, y, TaskDisplayState.OKAY.value)
            else:
                bitmap.draw_string(x, y, task.state_info)
            y += bitmap.font.height_in_pixel