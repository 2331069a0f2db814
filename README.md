# hospital-personnel

A library for managing a hospital's personnel. It covers job groups, the
titles in each group, and staff records. Each staff record belongs to a
hospital and may also belong to one of that hospital's polyclinics.

## What it does

- **Lookups.** It lists the job groups and the titles within one group.
  Results are cached in the cache that the service was given (a
  `MemoryCache` by default).
- **Staff records.** It adds, updates, deletes and lists staff, with these
  checks:
  - a new staff member's TC number or phone number must not already be in use;
  - the title must belong to the chosen job group;
  - a hospital may have at most one *Başhekim*;
  - a polyclinic given for a staff member must belong to the caller's hospital.
- **Listing with filters and pages.** You can filter by first name, last name
  or TC number. These filters are case-insensitive substring matches. You can
  also filter by job group id and by title id, and the results come back one
  page at a time.
- **Polyclinic statistics.** It gives the number of staff in a hospital
  polyclinic, and the number in each job group there.
- **Rate limiting.** Fixed-window limiters keyed by client IP.

## Configuration

`hospital_personnel.config.load_config(path)` looks in the directory `path` for
a file named `config` with a known extension (for example `config.yml`). It
reads that file as YAML and returns a `Config`. The `Config` has these
sections:

- `server`
- `database`
- `redis`
- `jwt`
- `hospital_service`

Keys are case-insensitive. Any key that is present in the file can be
overridden by an environment variable named after its dotted path in upper
case, such as `DATABASE.HOST`.

```yaml
server:
  port: "8080"
database:
  host: localhost
  port: "5432"
  user: user
  password: password
  dbname: personnel
  sslmode: disable
redis:
  addr: localhost:6379
  password: password
  db: 0
jwt:
  private_key: placeholder
  public_key: placeholder
  access_token_expiry: 15m
  refresh_token_expiry: 168h
hospital_service:
  base_url: http://localhost:8081
```

```python
from hospital_personnel.config import load_config

config = load_config("./configs")
print(config.server.port)
print(config.database.dsn())   # "host=localhost user=user ... sslmode=disable"
print(config.hospital_service.base_url)
```

`load_config` raises `ConfigError` in these cases:

- no config file is found;
- the file cannot be read;
- a value has the wrong shape.

`Config.from_dict` decodes a mapping that is already in memory.

## Storage

Records are kept in SQLite.

- `hospital_personnel.database.connect(path)` opens a database with foreign-key
  checks turned on.
- `run_migrations(conn)` creates any tables that are missing, then calls
  `seed_data(conn)`.

`seed_data` adds the standard job groups and their titles, but only when there
are no job groups yet. The job groups are Doktor, Hemşire, Teknisyen, İdari
Personel and Güvenlik.

```python
from hospital_personnel.database import connect, run_migrations

conn = connect("personnel.db")
run_migrations(conn)
```

Deleting a staff member is a soft delete: the row gets a `deleted_at`
timestamp and no longer shows up in lookups or listings.

## Layers

- **`hospital_personnel.repository.PersonnelRepository(conn)`** runs the
  queries. Fetching a single job group, title or staff member that does not
  exist raises `NotFoundError`.
- **`hospital_personnel.client.PolyclinicClient(base_url, timeout=5.0)`**
  fetches a hospital polyclinic with
  `GET {base_url}/api/polyclinic/hospital-polyclinics/{id}`. It raises
  `PolyclinicClientError` on a network failure, on a status other than 200,
  or on a body that cannot be decoded.
- **`hospital_personnel.service.PersonnelService(repository, polyclinic_client, cache=None)`**
  holds the business rules. It raises `PersonnelError` when a rule is broken.
  The `cache` can be any object with `get(key)` and `set(key, value)`.
- **`hospital_personnel.handler.PersonnelHandler(service, config=None)`** takes
  request input and returns a `Response` with a `status_code` and a `body`.
  Its input is query mappings, JSON bodies, path ids and a `UserInfo`. Its
  status codes are:
  - 200, or 201 for a newly added staff member;
  - 400 for malformed input or a broken rule;
  - 401 when no `UserInfo` is given;
  - 500 when a lookup, listing or count fails.

  A `str` body is plain text. Any other body is ready to serialise as JSON.

The data objects for requests and responses live in `hospital_personnel.dto`,
and the stored records live in `hospital_personnel.models`.

```python
from hospital_personnel.client import PolyclinicClient
from hospital_personnel.database import connect, run_migrations
from hospital_personnel.handler import PersonnelHandler, UserInfo
from hospital_personnel.repository import PersonnelRepository
from hospital_personnel.service import PersonnelService

conn = connect(":memory:")
run_migrations(conn)
service = PersonnelService(PersonnelRepository(conn), PolyclinicClient("http://localhost:8081"))
handler = PersonnelHandler(service)

response = handler.add_staff(
    {"first_name": "Ayşe", "last_name": "Demir", "tc": "TC-EXAMPLE-1",
     "phone": "phone-example-1", "job_group_id": 2, "title_id": 7,
     "working_days": "1,2,3,4,5"},
    UserInfo(hospital_id=1),
)
print(response.status_code, response.body)
```

## Rate limiting

`hospital_personnel.ratelimit.RateLimiter.check(ip, now=None)` records one
request and returns how many requests remain in the current window. When the
limit is passed it raises `RateLimitExceeded`. That exception has a
`status_code` of 429, a `retry_after` in seconds, and a `to_dict()` that gives
the error body. The limiter's `exceeded` counter counts rejections per IP, and
`reset()` clears all state.

```python
from hospital_personnel.ratelimit import RateLimitExceeded, login_rate_limiter

limiter = login_rate_limiter()   # 3 requests per 5 minutes per IP
try:
    limiter.check("203.0.113.7", now=0.0)
except RateLimitExceeded as exc:
    print(exc.to_dict())
```

| Preset | Limit |
| --- | --- |
| `auth_rate_limiter()` | 5 requests per minute |
| `login_rate_limiter()` | 3 requests per 5 minutes |
| `general_rate_limiter()` | 100 requests per minute |
| `admin_rate_limiter()` | 20 requests per minute |

## What it does not do

- There is no HTTP server, route table or command to run. `PersonnelHandler`
  produces responses, and wiring it to a web framework is up to you.
- It does not issue or verify tokens. The caller must establish the
  `UserInfo` (the hospital id) and check roles.
- It does not export metrics.
- It does not connect to PostgreSQL or Redis. Storage is SQLite, and caching
  is in-process unless you pass your own cache. `DatabaseConfig.dsn()` and
  `RedisConfig` are only read from configuration.