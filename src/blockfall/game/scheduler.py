from __future__ import annotations

import itertools
from typing import Callable, List, Optional


class RepeatingTask:
    """Handle for a callback registered with `TickScheduler.schedule_repeating`."""

    def __init__(self, interval_ms: int, callback: Callable[[], None], next_due_ms: int, order: int) -> None:
        self.interval_ms = interval_ms
        self.callback = callback
        self.next_due_ms = next_due_ms
        self.order = order
        self.active = True

    def cancel(self) -> None:
        self.active = False


class TickScheduler:
    """Virtual-time scheduler for repeating callbacks.

    Time only moves when `advance` is called: a front-end feeds it real frame
    times, tests and environments feed it whole tick intervals. Callbacks run
    synchronously inside `advance`, in due-time order, and may cancel or
    schedule tasks while running.
    """

    def __init__(self) -> None:
        self._now_ms = 0
        self._tasks: List[RepeatingTask] = []
        self._counter = itertools.count()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> List[RepeatingTask]:
        return [t for t in self._tasks if t.active]

    def schedule_repeating(self, interval_ms: int, callback: Callable[[], None]) -> RepeatingTask:
        if interval_ms <= 0:
            raise ValueError(f"interval must be positive, got {interval_ms}")
        task = RepeatingTask(interval_ms, callback, self._now_ms + interval_ms, next(self._counter))
        self._tasks.append(task)
        return task

    def _next_due(self, until_ms: int) -> Optional[RepeatingTask]:
        due = [t for t in self._tasks if t.active and t.next_due_ms <= until_ms]
        if not due:
            return None
        return min(due, key=lambda t: (t.next_due_ms, t.order))

    def advance(self, elapsed_ms: int) -> int:
        """Move time forward and fire due callbacks; returns how many fired."""
        if elapsed_ms < 0:
            raise ValueError(f"cannot advance by a negative amount ({elapsed_ms})")
        target = self._now_ms + elapsed_ms
        fired = 0
        while True:
            task = self._next_due(target)
            if task is None:
                break
            self._now_ms = task.next_due_ms
            task.next_due_ms += task.interval_ms
            task.callback()
            fired += 1
        self._now_ms = target
        self._tasks = [t for t in self._tasks if t.active]
        return fired
