"""Shared fixtures for the devotional app tests."""

import os

import pytest

os.environ.setdefault("FLASK_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ROTATION_REFRESH_ENABLED", "false")

from devotional_service import DevotionalCorpus
from models import Devotional


def devotional_entry(theme, number, **overrides):
  """Builds a corpus entry whose text identifies its theme and day."""
  entry = {
      "day": theme,
      "invocation": f"{theme} invocation {number}",
      "scripture": {
          "reference": f"{theme} reference {number}",
          "text": f"{theme} scripture {number}",
      },
      "reflection": f"{theme} reflection {number}",
      "physicalAction": f"{theme} action {number}",
      "guidedPrayer": f"{theme} prayer {number}",
      "truthToCarry": f"{theme} truth {number}",
      "benediction": f"{theme} benediction {number}",
      "teaching": f"{theme} teaching {number}",
      "insight": f"{theme} insight {number}",
  }
  entry.update(overrides)
  return entry


@pytest.fixture
def make_corpus():
  """Returns a factory for corpora with count entries per theme."""

  def _make(counts=None, extra_entries=()):
    counts = counts or {"presence": 31, "healing": 31, "truth": 31}
    entries = []
    # Interleave themes so per-theme order must survive filtering.
    for number in range(1, max(counts.values()) + 1):
      for theme, count in counts.items():
        if number <= count:
          entries.append(devotional_entry(theme, number))
    entries.extend(extra_entries)
    return DevotionalCorpus(Devotional.from_dict(e) for e in entries)

  return _make


@pytest.fixture
def full_corpus(make_corpus):
  return make_corpus()


@pytest.fixture
def small_corpus(make_corpus):
  return make_corpus({"presence": 2, "healing": 2, "truth": 1})


@pytest.fixture
def flask_app(full_corpus):
  import main

  main.app.config["TESTING"] = True
  main.app.config["CORPUS"] = full_corpus
  saved_day = main.calendar_day.day
  yield main.app
  main.app.config.pop("CORPUS", None)
  main.calendar_day.set(saved_day)


@pytest.fixture
def client(flask_app):
  return flask_app.test_client()


@pytest.fixture
def make_entry():
  return devotional_entry
