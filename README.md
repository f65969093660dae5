# jiraboard

Building blocks for a service that tracks Jira boards and sprints.

## What is inside

- `jiraboard.jira.client` – `JiraClient`, a client for the Jira agile and
  issue APIs using basic authentication. It fetches boards
  (`get_boards`), the active sprint (`get_active_sprint`), the future sprint
  with the highest id (`get_last_future_sprint`), sprint issue counts
  (`get_sprint_stats`), story point totals (`get_board_story_points`), a full
  board summary with status, type and assignee breakdowns
  (`get_board_summary`) and a single flattened issue (`get_issue`). Failures
  raise `JiraError`.
- `jiraboard.jira.models` – dataclasses for boards, sprints, issues and the
  summaries above; `BoardSummary.to_dict()` gives the JSON field names.
- `jiraboard.jira.markup` – Jira wiki markup to HTML (`wiki_markup_to_html`,
  `inline_wiki`) and plain text from ADF documents (`adf_text`).
- `jiraboard.filesystem` – file storage behind the `Storage` interface, with
  a built-in local-disk driver (`LocalStorage`), a `StorageFactory` that
  validates configuration and builds a driver, and a `Manager` that wraps
  whichever driver `Config.driver` names.
- `jiraboard.pagination` – `parse_pagination` reads page and limit from the
  query, then form values, then the body; `PaginatedResponse.create` builds a
  page envelope.
- `jiraboard.response.format` – the JSON envelope of every reply (`success`,
  `created`, `not_found`, `paginated`, `handle_error` and friends return a
  `Reply` holding a status code and a body with `to_dict()`).
- `jiraboard.response.validation` – turns `FieldError`s into client-facing
  `ValidationErrorDetail`s.
- `jiraboard.grpcresponse` – maps application errors to `GrpcStatusError`
  with the matching gRPC status code.
- `jiraboard.migration` – a plain SQL migration runner (`Migrator.up`,
  `down`, `status`) over any DB-API connection, reading
  `<id>_<name>.up.sql` / `<id>_<name>.down.sql` files;
  `create_migration_files` writes a new pair.
- `jiraboard.crypto` – AES-256-GCM string encryption with URL-safe base64
  output.
- `jiraboard.httpclient` and `jiraboard.grpcclient` – outgoing HTTP
  (`new_client`, a `requests.Session`) and gRPC (`new_conn`, an intercepted
  channel) clients that add an `X-Request-Id` and log every call. Logging is
  skipped when `APP_ENV` is `local`.
- `jiraboard.logger` – JSON-lines logging (`new_logger`) with request id and
  user details taken from a context mapping keyed by `ContextKey`.
- `jiraboard.cache` – `PrefixedRedisStorage`, a key/value store confined to a
  key prefix. It takes a client you supply that offers `get`, `set`,
  `delete` and `scan_iter` (such as a redis-py client); `reset` removes only
  keys under its prefix.
- `jiraboard.utils` – `ClientError` and `InternalError`, tokens, bcrypt
  password hashing, UTC and Jakarta time, decimal parsing.

## Examples

Encrypting a value:

```python
from jiraboard.crypto import encrypt_string, decrypt_string

sealed = encrypt_string("550e8400-e29b-41d4-a716-446655440000", "secret")
assert decrypt_string(sealed, "secret") == "550e8400-e29b-41d4-a716-446655440000"
```

Malformed input raises `ValueError`; a wrong key raises `ClientError`
(code 404) from `jiraboard.utils.errors`.

Reading a board:

```python
from jiraboard.jira.client import JiraClient

client = JiraClient("https://jira.example.com", "user@example.com", "token")
summary = client.get_board_summary(42)
print(summary.to_dict()["status_stats"])
```

Rendering a Jira description:

```python
from jiraboard.jira.markup import wiki_markup_to_html

html = wiki_markup_to_html("h2. Goal\n* *fast* builds\n* {{make test}}")
```

Building a page envelope:

```python
from jiraboard.pagination import PaginatedResponse

page = PaginatedResponse.create(["a", "b"], total=25, page=1, limit=10)
assert page.total_pages == 3 and page.has_next and not page.has_prev
```

Running migrations:

```python
import sqlite3
from jiraboard.migration import Migrator

migrator = Migrator(sqlite3.connect("app.db"))
migrator.up("migrations")
migrator.status("migrations")
```

## What it does not do

- It is a library only: there is no HTTP or gRPC server and no command-line
  tool.
- Only the local-disk storage driver is built in. The factory knows the
  `s3` and `drive` driver names and checks their settings, but their
  backends must be supplied as builders to `StorageFactory`.

## Tests

The test suite uses pytest and responses; both are in the `test` extra.