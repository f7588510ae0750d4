"""Local panel state and verify() scheduling."""

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

from devverify.engine import SasChallenge


@dataclass
class PanelState:
    """Ephemeral state owned by one panel controller.

    sas_challenge is only meaningful while the request is STARTED and the
    user has not answered it yet.
    """

    sas_challenge: SasChallenge | None = None
    awaiting_partner: bool = False

    def clear_challenge(self) -> None:
        self.sas_challenge = None
        self.awaiting_partner = False


class TaskScheduler:
    """Runs coroutines as tasks on the running event loop.

    Holds a strong reference to each task until it finishes so fire-and-forget
    verify() runs are not garbage collected mid-flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    def __call__(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        """Number of tasks still running."""
        return len(self._tasks)
