"""Agent that fetches arithmetic tasks, computes them and reports back."""

import argparse
import json
import logging
import threading
import urllib.error
import urllib.request

from calcgrid.config import get_env_as_int
from calcgrid.models import Task
from calcgrid.scheduler import NoTaskAvailableError, TaskNotFoundError
from calcgrid.taskservice import RESULT_PATH, TASK_PATH

log = logging.getLogger(__name__)

DEFAULT_ADDRESS = "localhost:50051"


def compute(arg1, arg2, operation):
    """Apply ``operation``; division by zero and unknown operators give 0."""
    if operation == "+":
        return arg1 + arg2
    if operation == "-":
        return arg1 - arg2
    if operation == "*":
        return arg1 * arg2
    if operation == "/" and arg2 != 0:
        return arg1 / arg2
    return 0


class TaskClient:
    """Client of the task service."""

    def __init__(self, address=DEFAULT_ADDRESS, timeout=1.0):
        self.base_url = f"http://{address}"
        self.timeout = timeout

    def _request(self, path, not_found, payload=None):
        data = None if payload is None else json.dumps(payload).encode()
        request = urllib.request.Request(
            self.base_url + path, data=data, headers={"Content-Type": "application/json"}
        )
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status, raw = response.status, response.read()
        except urllib.error.HTTPError as exc:
            with exc:
                status, raw = exc.code, exc.read()
        try:
            body = json.loads(raw or b"{}")
        except ValueError:
            body = {}
        if status == 404:
            raise not_found(body.get("error", "not found"))
        if status != 200:
            raise ConnectionError(f"task service replied with status {status}")
        return body

    def get_task(self):
        """Fetch the next task; raises ``NoTaskAvailableError`` when the queue is empty."""
        task = self._request(TASK_PATH, NoTaskAvailableError).get("task")
        return None if task is None else Task(**task)

    def submit_result(self, task_id, result):
        """Send a result and return the status the service reports."""
        body = self._request(RESULT_PATH, TaskNotFoundError, {"id": task_id, "result": result})
        return body.get("status", "")


def worker(client, stop_event, idle_delay=1.0):
    """Fetch, compute and submit tasks until ``stop_event`` is set."""
    while not stop_event.is_set():
        try:
            task = client.get_task()
        except (OSError, LookupError, ValueError, TypeError) as exc:
            log.warning("Error fetching task: %s", exc)
            task = None
        if task is None:
            stop_event.wait(idle_delay)
            continue
        try:
            client.submit_result(task.id, compute(task.arg1, task.arg2, task.operation))
        except (OSError, LookupError, ValueError) as exc:
            log.warning("Error submitting result: %s", exc)


def main(argv=None):
    """Start ``COMPUTING_POWER`` workers and wait for them."""
    parser = argparse.ArgumentParser(prog="calcgrid-agent")
    parser.add_argument("--address", default=DEFAULT_ADDRESS)
    args = parser.parse_args(argv)

    client = TaskClient(args.address)
    stop_event = threading.Event()
    threads = [
        threading.Thread(target=worker, args=(client, stop_event), daemon=True)
        for _ in range(max(get_env_as_int("COMPUTING_POWER", 0), 0))
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return 0