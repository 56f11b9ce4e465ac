# calcgrid

A small distributed calculator. An **orchestrator** keeps user accounts in
SQLite, accepts arithmetic expressions over an HTTP API protected by JSON Web
Tokens, and runs a task service from which **agents** fetch arithmetic tasks
and to which they report results.

## Installation

```
pip install calcgrid
```

## Configuration

`calcgrid.config.load_config()` loads a `.env` file from the working
directory if there is one, then reads the environment into a frozen
`Config` dataclass.

| Variable                  | `Config` field           | Default                  |
|---------------------------|--------------------------|--------------------------|
| `DATABASE_URL`            | `database_url`           | `sqlite:///calc_proj.db` |
| `JWT_SECRET`              | `jwt_secret`             | `secret`                 |
| `TIME_ADDITION_MS`        | `time_addition_ms`       | 100                      |
| `TIME_SUBTRACTION_MS`     | `time_subtraction_ms`    | 100                      |
| `TIME_MULTIPLICATIONS_MS` | `time_multiplication_ms` | 200                      |
| `TIME_DIVISIONS_MS`       | `time_division_ms`       | 200                      |
| `COMPUTING_POWER`         | `computing_power`        | 4                        |

A variable that is set, even to an empty string, overrides the default.
Integer settings that are not a plain 64-bit integer fall back to their
defaults. Set your own `JWT_SECRET` for anything beyond local experiments.

`DATABASE_URL` may be a file path or a `sqlite:///path` URL
(`sqlite://` alone opens an in-memory database). Other schemes raise
`ValueError`. `calcgrid.database.init_db` opens the database and creates the
`users`, `expressions` and `tasks` tables if they are missing.

## Running

Start the orchestrator:

```
calcgrid-orchestrator
```

It serves the HTTP API on port 8080 (`--port`) and the task service on port
50051 (`--task-port`).

Start an agent:

```
COMPUTING_POWER=2 calcgrid-agent
```

The agent runs `COMPUTING_POWER` worker threads; if the variable is unset or
not a number it starts none and exits. It reads the variable from the
environment only, not from `.env`. `--address` sets the task service address
(default `localhost:50051`). Each worker asks for a task, waits one second
when none is available or the request fails, and submits the result of every
task it computes. `calcgrid.agent.compute(arg1, arg2, operation)` supports
`+`, `-`, `*` and `/`; division by zero and unknown operations give `0`.

## HTTP API

Public endpoints:

* `POST /api/v1/register` with `{"login": ..., "password": ...}` creates a
  user and answers `200 OK`. A body that is not a JSON object with string
  fields gets `400`; a taken login or a password longer than 72 bytes gets
  `500`.
* `POST /api/v1/login` with the same body answers `{"token": ...}`, or `401`
  for a wrong login or password.

Endpoints that need an `Authorization: Bearer <token>` header (a missing
header, a bad token or a token without a numeric `userID` claim gets `401`):

* `POST /api/v1/calculate` with `{"expression": "2+2*2"}` stores the
  expression with status `pending` and answers `201` with `{"id": ...}`;
  a malformed body gets `422`.
* `GET /api/v1/expressions` lists the caller's expressions as
  `{"expressions": [...]}`.
* `GET /api/v1/expressions/<id>` answers `{"expression": {...}}`, `400` for
  an id that is not an integer, or `404` if it does not exist or belongs to
  another user.

Expressions are returned as objects with the keys `ID`, `UserID`,
`Expression`, `Status` and `Result`.

Example session:

```
curl -X POST localhost:8080/api/v1/register \
     -d '{"login": "alice", "password": "password"}'
curl -X POST localhost:8080/api/v1/login \
     -d '{"login": "alice", "password": "password"}'
curl -X POST localhost:8080/api/v1/calculate \
     -H 'Authorization: Bearer token' \
     -d '{"expression": "2+2*2"}'
```

Replace `token` with the value returned by the login call.

## Task service

`calcgrid.taskservice` serves JSON over HTTP:

* `GET /task` answers `{"task": {...}}` with the next queued task, or `404`
  when the queue is empty.
* `POST /result` with `{"id": ..., "result": ...}` answers
  `{"status": "ok"}`, `404` if the id is unknown, or `400` for a malformed
  body.

`make_server(service, host, port)` binds a server without starting it;
`serve(service, host, port)` runs one until the process stops.
`calcgrid.agent.TaskClient` is the matching client.

## Using it as a library

```python
from calcgrid.config import load_config
from calcgrid.database import init_db
from calcgrid.scheduler import Scheduler
from calcgrid.api import create_app

config = load_config()
conn = init_db(config.database_url)
app = create_app(config, conn, Scheduler())
```

`calcgrid.scheduler.Scheduler` is a thread-safe FIFO: `add_task` queues a
`calcgrid.models.Task`, `get_next_task` pops one or raises
`NoTaskAvailableError`, and `submit_task_result(task_id, result)` marks the
registered expression with that id as `completed` or raises
`TaskNotFoundError`. `calcgrid.auth.generate_jwt` and
`calcgrid.auth.parse_authorization` issue and check tokens.

## What it does not do

* Expressions are stored, but nothing parses them or splits them into tasks.
  The task queue only holds what is put there with `Scheduler.add_task`.
* Results reported by agents are written to the in-memory expression
  records only; the stored status and result in the database stay as they
  were, so the HTTP API keeps showing `pending`.
* The `time_*_ms` settings are read but not used.
* Storage is SQLite only.

## Tests

```
pip install calcgrid[test]
pytest
```