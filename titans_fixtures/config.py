from __future__ import annotations

import pathlib
from typing import Optional

import yaml
from pydantic import BaseModel

from .utils import LONDON_TZ, read_env

CONFIG_PATH = pathlib.Path(__file__).resolve().parent / "config.yaml"

CALENDAR_ID = "c_titansfixtures@group.calendar.google.com"
DEFAULT_TIMEOUT = 25.0


class Settings(BaseModel):
    calendar_id: str = CALENDAR_ID
    timeout_seconds: float = DEFAULT_TIMEOUT
    timezone: str = LONDON_TZ
    output_dir: str = "public/data"


def load_config(path: Optional[pathlib.Path] = None) -> Settings:
    """Read config.yaml, then let TITANS_* environment variables override it."""
    cfg_path = path or CONFIG_PATH
    raw: dict = {}
    if cfg_path.exists():
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}

    env_id = read_env("TITANS_CALENDAR_ID")
    if env_id:
        raw["calendar_id"] = env_id
    env_timeout = read_env("TITANS_TIMEOUT")
    if env_timeout:
        raw["timeout_seconds"] = float(env_timeout)
    return Settings(**raw)
