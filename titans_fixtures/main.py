from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from datetime import date, datetime
from typing import List, Optional, Tuple

from .config import load_config
from .errors import ScheduleUnavailable
from .models import Fixture
from .selection import (
    FilterType,
    filter_fixtures,
    first_upcoming,
    fixtures_on,
    group_by_month,
    hidden_weekday_count,
    in_month,
    is_derby,
    month_cells,
)
from .service import get_fixtures
from .utils import is_weekday, iso_z, read_json, to_local, write_json

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Cannot reach the schedule service right now. Please try again later."
REQUIRED_FIELDS = ("id", "date", "teamName", "location", "competition", "status")


def _dump(fixtures: List[Fixture]) -> list:
    out = []
    for f in fixtures:
        item = f.model_dump(by_alias=True)
        item["date"] = iso_z(f.date)
        out.append(item)
    return out


def _load_fixtures() -> Optional[List[Fixture]]:
    try:
        return get_fixtures()
    except ScheduleUnavailable as e:
        logger.debug("Pipeline failed", exc_info=e)
        print(UNAVAILABLE_MESSAGE, file=sys.stderr)
        return None


def fetch_cmd(out: Optional[str] = None) -> int:
    cfg = load_config()
    fixtures = _load_fixtures()
    if fixtures is None:
        return 2
    path = pathlib.Path(out) if out else pathlib.Path(cfg.output_dir) / "fixtures.json"
    write_json(path, _dump(fixtures))
    print(f"wrote {len(fixtures)} fixtures to {path}")
    return 0


def _format_line(f: Fixture, tz_name: str) -> str:
    when = to_local(f.date, tz_name).strftime("%a %d %b %H:%M")
    if f.opponent:
        home, away = (f.team_name, f.opponent) if f.is_home else (f.opponent, f.team_name)
        teams = f"{home} v {away}"
    else:
        teams = f.team_name
    parts = [when, teams, f.competition]
    if f.competition_tag:
        parts.append(f"[{f.competition_tag}]")
    if f.score:
        parts.append(f"{f.score} ({f.result})")
    if is_derby(f):
        parts.append("DERBY")
    return "  ".join(parts)


def year_month(value: str) -> Tuple[int, int]:
    try:
        year, month = (int(x) for x in value.split("-"))
        date(year, month, 1)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM, got {value!r}")
    return year, month


def _print_grid(fixtures: List[Fixture], year: int, month: int, tz_name: str) -> None:
    print("  ".join(f"{d:>4}" for d in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")))
    cells = month_cells(year, month)
    for i in range(0, len(cells), 7):
        row = []
        for day in cells[i:i + 7]:
            if day.month != month:
                row.append(f"{'.':>4}")
            else:
                count = len(fixtures_on(fixtures, day, tz_name))
                row.append(f"{day.day:>2}{'*' * min(count, 2):<2}")
        print("  ".join(row))
    print()


def month_cmd(year: int, mon: int, kind: FilterType, weekdays: bool, grid: bool = False) -> int:
    cfg = load_config()
    fixtures = _load_fixtures()
    if fixtures is None:
        return 2
    selected = filter_fixtures(in_month(fixtures, year, mon, cfg.timezone), kind)
    hidden = 0
    if not weekdays:
        hidden = hidden_weekday_count(selected, year, mon, cfg.timezone)
        selected = [f for f in selected if not is_weekday(f.date, cfg.timezone)]
    if grid:
        _print_grid(selected, year, mon, cfg.timezone)
    if not selected:
        print("No scheduled matches found.")
    nxt = first_upcoming(selected)
    for f in selected:
        line = _format_line(f, cfg.timezone)
        print(f"{line}  <- next" if f is nxt else line)
    if hidden:
        print(f"({hidden} weekday events hidden, use --weekdays to show them)")
    return 0


def upcoming_cmd(kind: FilterType) -> int:
    cfg = load_config()
    fixtures = _load_fixtures()
    if fixtures is None:
        return 2
    upcoming = [f for f in filter_fixtures(fixtures, kind) if f.status == "upcoming"]
    if not upcoming:
        print("No scheduled matches found.")
    for label, items in group_by_month(upcoming, cfg.timezone).items():
        print(label.upper())
        for f in items:
            print(f"  {_format_line(f, cfg.timezone)}")
    return 0


def validate_cmd(path: Optional[str] = None) -> int:
    p = pathlib.Path(path) if path else pathlib.Path(load_config().output_dir) / "fixtures.json"
    if not p.exists():
        print(f"missing {p}")
        return 1
    data = read_json(p)
    if not isinstance(data, list):
        print(f"{p.name} not a list")
        return 1
    ok = True
    previous: Optional[datetime] = None
    for idx, f in enumerate(data):
        for field in REQUIRED_FIELDS:
            if not f.get(field):
                print(f"{p.name}[{idx}] missing {field}")
                ok = False
                break
        else:
            when = datetime.fromisoformat(f["date"].replace("Z", "+00:00"))
            if previous is not None and when < previous:
                print(f"{p.name}[{idx}] out of order")
                ok = False
            previous = when
    if not ok:
        return 1
    print("ok")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="titans-fixtures", description="Titans fixture calendar")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="cmd", required=True)
    p_fetch = sub.add_parser("fetch")
    p_fetch.add_argument("--out")
    p_month = sub.add_parser("month")
    p_month.add_argument("month", type=year_month, help="YYYY-MM")
    p_month.add_argument("--filter", choices=["all", "home", "away"], default="all")
    p_month.add_argument("--weekdays", action="store_true", help="include Mon-Fri events")
    p_month.add_argument("--grid", action="store_true", help="print a calendar grid above the list")
    p_upcoming = sub.add_parser("upcoming")
    p_upcoming.add_argument("--filter", choices=["all", "home", "away"], default="all")
    p_validate = sub.add_parser("validate")
    p_validate.add_argument("path", nargs="?")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.cmd == "fetch":
        return fetch_cmd(args.out)
    elif args.cmd == "month":
        year, mon = args.month
        return month_cmd(year, mon, FilterType(args.filter.upper()), args.weekdays, args.grid)
    elif args.cmd == "upcoming":
        return upcoming_cmd(FilterType(args.filter.upper()))
    elif args.cmd == "validate":
        return validate_cmd(args.path)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
