"""Per-browser reading state, persisted through an injected key/value store.

The rotation selection is either following the calendar (AutoDay) or pinned
by the reader (ManualDay). A calendar refresh only moves an AutoDay.
"""

import dataclasses
import datetime
from typing import Optional, Union

import flask

from models import Theme
import rotation

THEME_KEY = "current_theme"
DAY_NUMBER_KEY = "day_number"
DARK_MODE_KEY = "dark_mode"
ROTATION_DAY_KEY = "rotation_day"
ROTATION_PINNED_KEY = "rotation_pinned"
LANDING_SEEN_KEY = "has_seen_landing"


class PreferenceStore:
  """Minimal key/value interface for persisted preferences."""

  def get(self, key, default=None):
    raise NotImplementedError

  def set(self, key, value):
    raise NotImplementedError


class SessionPreferenceStore(PreferenceStore):
  """Stores preferences in the signed Flask session cookie."""

  def __init__(self, session=None):
    self._session = session if session is not None else flask.session

  def get(self, key, default=None):
    return self._session.get(key, default)

  def set(self, key, value):
    self._session[key] = value


class MemoryPreferenceStore(PreferenceStore):

  def __init__(self, initial=None):
    self.values = dict(initial or {})

  def get(self, key, default=None):
    return self.values.get(key, default)

  def set(self, key, value):
    self.values[key] = value


@dataclasses.dataclass(frozen=True)
class AutoDay:
  """Rotation day that follows the calendar."""

  day: int
  pinned = False


@dataclasses.dataclass(frozen=True)
class ManualDay:
  """Rotation day chosen by the reader; calendar refreshes leave it alone."""

  day: int
  pinned = True


RotationSelection = Union[AutoDay, ManualDay]


def refresh_selection(
    selection: Optional[RotationSelection], auto_day: int
) -> RotationSelection:
  """Applies a recomputed calendar day unless the reader pinned a day."""
  if isinstance(selection, ManualDay):
    return selection
  return AutoDay(rotation.normalize_day(auto_day))


def navigate_selection(
    selection: RotationSelection, direction: str
) -> ManualDay:
  return ManualDay(rotation.navigate(selection.day, direction))


def default_day_number(today: datetime.date, total_days: int) -> int:
  """Day of month wrapped into [1, total_days]."""
  if total_days < 1:
    return 1
  return (today.day - 1) % total_days + 1


class ReadingState:
  """Reader preferences and position, threaded through each request."""

  def __init__(self, store: PreferenceStore, corpus, today: datetime.date):
    self.store = store
    self.corpus = corpus
    self.today = today

  @property
  def current_theme(self) -> Theme:
    theme = Theme.parse(self.store.get(THEME_KEY))
    if theme not in rotation.THEME_CYCLE:
      return rotation.THEME_CYCLE[0]
    return theme

  def set_theme(self, theme: Theme):
    """Switches theme; the day number restarts from today's date."""
    self.store.set(THEME_KEY, theme.value)
    self.store.set(
        DAY_NUMBER_KEY,
        default_day_number(self.today, self.total_days_for_theme),
    )

  @property
  def total_days_for_theme(self) -> int:
    return self.corpus.count_for_theme(self.current_theme)

  @property
  def day_number(self) -> int:
    total = self.total_days_for_theme
    saved = self.store.get(DAY_NUMBER_KEY)
    if isinstance(saved, int) and 0 < saved <= total:
      return saved
    return default_day_number(self.today, total)

  def set_day_number(self, day_number: int) -> bool:
    """Stores day_number if it is within the theme's bounds."""
    if 0 < day_number <= self.total_days_for_theme:
      self.store.set(DAY_NUMBER_KEY, day_number)
      return True
    return False

  def navigate_theme_day(self, direction: str) -> int:
    """Moves within the current theme, wrapping at either end."""
    direction = rotation.parse_direction(direction)
    total = max(self.total_days_for_theme, 1)
    if direction == rotation.NEXT:
      new_day = self.day_number + 1
      new_day = 1 if new_day > total else new_day
    else:
      new_day = self.day_number - 1
      new_day = total if new_day < 1 else new_day
    self.store.set(DAY_NUMBER_KEY, new_day)
    return new_day

  @property
  def dark_mode(self) -> bool:
    return bool(self.store.get(DARK_MODE_KEY, False))

  def set_dark_mode(self, enabled: bool):
    self.store.set(DARK_MODE_KEY, bool(enabled))

  def toggle_dark_mode(self) -> bool:
    self.set_dark_mode(not self.dark_mode)
    return self.dark_mode

  @property
  def has_seen_landing(self) -> bool:
    return bool(self.store.get(LANDING_SEEN_KEY, False))

  def mark_landing_seen(self):
    self.store.set(LANDING_SEEN_KEY, True)

  @property
  def rotation_selection(self) -> Optional[RotationSelection]:
    day = self.store.get(ROTATION_DAY_KEY)
    if not isinstance(day, int):
      return None
    if self.store.get(ROTATION_PINNED_KEY, False):
      return ManualDay(rotation.normalize_day(day))
    return AutoDay(rotation.normalize_day(day))

  def _save_selection(self, selection: RotationSelection):
    self.store.set(ROTATION_DAY_KEY, selection.day)
    self.store.set(ROTATION_PINNED_KEY, selection.pinned)

  def sync_rotation(self, auto_day: int) -> RotationSelection:
    """Follows the calendar day unless the reader has pinned a day."""
    selection = refresh_selection(self.rotation_selection, auto_day)
    self._save_selection(selection)
    return selection

  def navigate_rotation(self, direction: str, auto_day: int) -> ManualDay:
    """Steps the rotation day by hand, pinning it for the session."""
    current = self.rotation_selection or AutoDay(
        rotation.normalize_day(auto_day)
    )
    selection = navigate_selection(current, direction)
    self._save_selection(selection)
    return selection
