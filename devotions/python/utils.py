"""Shared configuration, paths and helpers for the devotional app."""

import datetime
import json
import os

import pytz

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(SCRIPT_DIR, "..", "data")
TEMPLATE_DIR = os.path.abspath(os.path.join(SCRIPT_DIR, "..", "templates"))
STATIC_DIR = os.path.abspath(os.path.join(SCRIPT_DIR, "..", "static"))

DEVOTIONALS_JSON_PATH = os.getenv(
    "DEVOTIONALS_JSON_PATH", os.path.join(DATA_DIR, "devotionals.json")
)

# Local day boundaries (quarter resets, midnight refresh) use this zone.
DEFAULT_TIMEZONE = "America/New_York"
TIMEZONE_NAME = os.getenv("DEVOTIONAL_TIMEZONE", DEFAULT_TIMEZONE)

GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")


def env_flag(name: str, default: bool = True) -> bool:
  """Reads a boolean flag such as ROTATION_REFRESH_ENABLED from the env."""
  value = os.getenv(name)
  if value is None:
    return default
  return value.strip().lower() not in ("0", "false", "no", "off", "")


def get_timezone(tz_name: str = None):
  """Returns the pytz zone for tz_name, falling back to the default zone."""
  try:
    return pytz.timezone(tz_name or TIMEZONE_NAME)
  except pytz.UnknownTimeZoneError:
    return pytz.timezone(DEFAULT_TIMEZONE)


def local_now(tz_name: str = None) -> datetime.datetime:
  """Returns the current aware datetime in the configured zone."""
  return datetime.datetime.now(get_timezone(tz_name))


def load_json(filepath: str) -> dict:
  """Loads a JSON document from disk."""
  with open(filepath, mode="r", encoding="utf-8") as f:
    return json.load(f)
