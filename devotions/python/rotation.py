"""The 93-day rotation through Presence, Healing and Truth.

Absolute days interleave the themes one day at a time:
day 1 = Presence 1, day 2 = Healing 1, day 3 = Truth 1, day 4 = Presence 2,
and so on until day 93 = Truth 31. The cycle restarts on the first day of
every civil quarter.
"""

import calendar
import datetime
import math

from models import RotationInfo, Theme

THEME_CYCLE = (Theme.PRESENCE, Theme.HEALING, Theme.TRUTH)
DAYS_PER_THEME = 31
TOTAL_DAYS = DAYS_PER_THEME * len(THEME_CYCLE)

PREVIOUS = "previous"
NEXT = "next"
_DIRECTION_ALIASES = {"previous": PREVIOUS, "prev": PREVIOUS, "next": NEXT}


def parse_direction(direction: str) -> str:
  """Normalizes a navigation direction, raising ValueError if unknown."""
  try:
    return _DIRECTION_ALIASES[str(direction).lower()]
  except KeyError:
    raise ValueError(f"Unknown direction: {direction!r}") from None


def normalize_day(absolute_day: int) -> int:
  """Wraps any integer into [1, TOTAL_DAYS]."""
  return (absolute_day - 1) % TOTAL_DAYS + 1


def rotation_day_from_absolute(absolute_day: int) -> tuple[Theme, int]:
  """Returns (theme, theme_day) for an absolute rotation day."""
  normalized = normalize_day(absolute_day)
  theme = THEME_CYCLE[(normalized - 1) % len(THEME_CYCLE)]
  theme_day = (normalized - 1) // len(THEME_CYCLE) + 1
  return theme, theme_day


def rotation_info_from_absolute(absolute_day: int) -> RotationInfo:
  normalized = normalize_day(absolute_day)
  theme, theme_day = rotation_day_from_absolute(normalized)
  # Half-up rounding; round() would round half to even.
  progress = int(math.floor(normalized * 100 / TOTAL_DAYS + 0.5))
  return RotationInfo(
      absolute_day=normalized,
      theme=theme,
      theme_day=theme_day,
      total_days=TOTAL_DAYS,
      theme_name=theme.display_name,
      progress=progress,
  )


def quarter_start_month(month: int) -> int:
  """Returns the first month (1, 4, 7 or 10) of the quarter holding month."""
  return (month - 1) // 3 * 3 + 1


def current_absolute_day_for_quarter(today: datetime.date) -> int:
  """Returns the rotation day for a date, counting from its quarter's start."""
  if isinstance(today, datetime.datetime):
    today = today.date()

  days_in_quarter = 0
  for month in range(quarter_start_month(today.month), today.month):
    days_in_quarter += calendar.monthrange(today.year, month)[1]
  days_in_quarter += today.day

  return normalize_day(days_in_quarter)


def navigate(current_absolute_day: int, direction: str) -> int:
  """Moves one day forward or back, wrapping between 1 and TOTAL_DAYS."""
  direction = parse_direction(direction)
  if direction == NEXT:
    new_day = current_absolute_day + 1
    return 1 if new_day > TOTAL_DAYS else new_day
  new_day = current_absolute_day - 1
  return TOTAL_DAYS if new_day < 1 else new_day


def days_remaining(absolute_day: int) -> int:
  """Days left in the cycle; 0 means the journey is complete."""
  return TOTAL_DAYS - normalize_day(absolute_day)
