"""Task service that agents poll for work and report results to."""

import json
import logging
from dataclasses import asdict
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from calcgrid.scheduler import NoTaskAvailableError, TaskNotFoundError

log = logging.getLogger(__name__)

DEFAULT_PORT = 50051
TASK_PATH = "/task"
RESULT_PATH = "/result"


class TaskService:
    """Hands queued tasks to agents and records the results they send back."""

    def __init__(self, scheduler):
        self.scheduler = scheduler

    def get_task(self):
        return self.scheduler.get_next_task()

    def submit_result(self, task_id, result):
        self.scheduler.submit_task_result(task_id, result)
        return "ok"


def _handler_for(service):
    class _Handler(BaseHTTPRequestHandler):
        def _send(self, status, payload):
            body = json.dumps(payload).encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self):  # noqa: N802
            if urlsplit(self.path).path != TASK_PATH:
                return self._send(404, {"error": "not found"})
            try:
                self._send(200, {"task": asdict(service.get_task())})
            except NoTaskAvailableError as exc:
                self._send(404, {"error": str(exc)})

        def do_POST(self):  # noqa: N802
            if urlsplit(self.path).path != RESULT_PATH:
                return self._send(404, {"error": "not found"})
            try:
                length = int(self.headers.get("Content-Length", "0"))
                payload = json.loads(self.rfile.read(length) or b"null")
                task_id, result = payload["id"], payload["result"]
                if type(task_id) is not int or type(result) not in (int, float):
                    raise ValueError("id must be an integer and result a number")
                self._send(200, {"status": service.submit_result(task_id, float(result))})
            except TaskNotFoundError as exc:
                self._send(404, {"status": "error", "error": str(exc)})
            except (ValueError, KeyError, TypeError) as exc:
                self._send(400, {"status": "error", "error": str(exc)})

    return _Handler


def make_server(service, host="", port=DEFAULT_PORT):
    """Bind a server for ``service`` without starting it."""
    server = ThreadingHTTPServer((host, port), _handler_for(service))
    server.daemon_threads = True
    return server


def serve(service, host="", port=DEFAULT_PORT):
    """Run the task service until the process stops."""
    with make_server(service, host, port) as server:
        log.info("Task service is running on port %d", server.server_address[1])
        server.serve_forever()