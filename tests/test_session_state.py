"""Tests for reader state, including the calendar drift guard."""

import datetime

import pytest

from models import Theme
import session_state
from session_state import AutoDay, ManualDay

TODAY = datetime.date(2026, 10, 19)


@pytest.fixture
def store():
  return session_state.MemoryPreferenceStore()


@pytest.fixture
def state(store, full_corpus):
  return session_state.ReadingState(store, full_corpus, TODAY)


def test_first_sync_follows_the_calendar(state, store):
  assert state.rotation_selection is None
  assert state.sync_rotation(19) == AutoDay(19)
  assert store.get(session_state.ROTATION_DAY_KEY) == 19
  assert store.get(session_state.ROTATION_PINNED_KEY) is False


def test_auto_tracking_session_follows_refresh(state):
  state.sync_rotation(19)
  assert state.sync_rotation(20) == AutoDay(20)
  assert state.rotation_selection == AutoDay(20)


def test_manual_navigation_pins_the_day(state):
  state.sync_rotation(19)
  assert state.navigate_rotation("next", 19) == ManualDay(20)
  assert state.sync_rotation(21) == ManualDay(20)
  assert state.sync_rotation(1) == ManualDay(20)
  assert state.rotation_selection == ManualDay(20)


def test_manual_pin_survives_a_new_request(store, full_corpus):
  first = session_state.ReadingState(store, full_corpus, TODAY)
  first.sync_rotation(19)
  first.navigate_rotation("previous", 19)
  later = session_state.ReadingState(
      store, full_corpus, TODAY + datetime.timedelta(days=1)
  )
  assert later.sync_rotation(20) == ManualDay(18)


def test_navigation_without_a_selection_starts_from_calendar(state):
  assert state.navigate_rotation("next", 93) == ManualDay(1)


def test_navigation_wraps_backwards(state):
  state.sync_rotation(1)
  assert state.navigate_rotation("previous", 1) == ManualDay(93)


def test_refresh_selection_is_pure():
  assert session_state.refresh_selection(None, 94) == AutoDay(1)
  assert session_state.refresh_selection(AutoDay(3), 4) == AutoDay(4)
  assert session_state.refresh_selection(ManualDay(3), 4) == ManualDay(3)


def test_default_theme_and_day(state):
  assert state.current_theme == Theme.PRESENCE
  assert state.day_number == 19


def test_invalid_saved_theme_is_ignored(store, state):
  store.set(session_state.THEME_KEY, "integrated")
  assert state.current_theme == Theme.PRESENCE
  store.set(session_state.THEME_KEY, "nonsense")
  assert state.current_theme == Theme.PRESENCE


def test_set_theme_resets_day_number(state):
  state.set_day_number(5)
  state.set_theme(Theme.TRUTH)
  assert state.current_theme == Theme.TRUTH
  assert state.day_number == 19


def test_day_number_default_wraps_to_theme_length(store, small_corpus):
  state = session_state.ReadingState(store, small_corpus, TODAY)
  state.set_theme(Theme.HEALING)
  # Day 19 of the month wrapped into a two-entry theme.
  assert state.day_number == 1


def test_set_day_number_checks_bounds(state):
  assert state.set_day_number(31)
  assert state.day_number == 31
  assert not state.set_day_number(32)
  assert not state.set_day_number(0)
  assert state.day_number == 31


def test_out_of_range_saved_day_uses_default(store, state):
  store.set(session_state.DAY_NUMBER_KEY, 77)
  assert state.day_number == 19


def test_navigate_theme_day_wraps(state):
  state.set_day_number(31)
  assert state.navigate_theme_day("next") == 1
  assert state.navigate_theme_day("previous") == 31
  assert state.navigate_theme_day("previous") == 30


def test_navigate_theme_day_rejects_unknown_direction(state):
  with pytest.raises(ValueError):
    state.navigate_theme_day("up")


def test_dark_mode(state, store):
  assert state.dark_mode is False
  assert state.toggle_dark_mode() is True
  assert store.get(session_state.DARK_MODE_KEY) is True
  state.set_dark_mode(False)
  assert state.dark_mode is False


def test_landing_flag(state):
  assert not state.has_seen_landing
  state.mark_landing_seen()
  assert state.has_seen_landing


def test_default_day_number_handles_empty_theme():
  assert session_state.default_day_number(TODAY, 0) == 1
