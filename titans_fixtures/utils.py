from __future__ import annotations

import os
import pathlib
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import orjson

LONDON_TZ = "Europe/London"


def ensure_dir(p: str | pathlib.Path) -> None:
    pathlib.Path(p).mkdir(parents=True, exist_ok=True)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def iso_z(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def to_local(dt: datetime, tz_name: str = LONDON_TZ) -> datetime:
    tz = ZoneInfo(tz_name)
    return dt.astimezone(tz) if dt.tzinfo else dt.replace(tzinfo=tz)


def is_weekday(dt: datetime, tz_name: str = LONDON_TZ) -> bool:
    # Mon..Fri in the club's own timezone
    return to_local(dt, tz_name).weekday() < 5


def write_json(path: str | pathlib.Path, data) -> None:
    ensure_dir(pathlib.Path(path).parent)
    with open(path, "wb") as f:
        f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))


def read_json(path: str | pathlib.Path):
    with open(path, "rb") as f:
        return orjson.loads(f.read())


def read_env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)
