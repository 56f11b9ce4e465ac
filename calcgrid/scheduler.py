"""In-memory queue of tasks handed out to agents."""

import threading
from collections import deque


class NoTaskAvailableError(LookupError):
    """The task queue is empty."""


class TaskNotFoundError(LookupError):
    """A submitted result matches no known entry."""


class Scheduler:
    """Thread-safe FIFO of tasks plus the expressions results are written to."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tasks = deque()
        self._expressions = {}

    def __len__(self):
        return len(self._tasks)

    def add_task(self, task):
        with self._lock:
            self._tasks.append(task)

    def register_expression(self, expression):
        with self._lock:
            self._expressions[expression.id] = expression

    def get_next_task(self):
        with self._lock:
            if not self._tasks:
                raise NoTaskAvailableError("no tasks available")
            return self._tasks.popleft()

    def submit_task_result(self, task_id, result):
        """Complete the expression whose id is ``task_id`` with ``result``."""
        with self._lock:
            expression = self._expressions.get(task_id)
            if expression is None:
                raise TaskNotFoundError("task not found")
            expression.result, expression.status = result, "completed"