"""Looks up devotionals in the static corpus and applies per-theme defaults."""

import dataclasses
import functools
from typing import Iterable, Optional

from models import Devotional, Theme
import rotation
import utils

# Promise text and image used when a corpus entry leaves them empty.
DEFAULT_PROMISES = {
    Theme.PRESENCE: {
        "promise_for_the_day": (
            "I am never alone; God's presence surrounds me like the morning"
            " light"
        ),
        "promise_image": "/static/images/promises/presence-sunrise.svg",
    },
    Theme.HEALING: {
        "promise_for_the_day": (
            "God's healing flows through me like a gentle stream, restoring"
            " what was broken"
        ),
        "promise_image": "/static/images/promises/healing-stream.svg",
    },
    Theme.TRUTH: {
        "promise_for_the_day": (
            "Truth illuminates my path and sets my spirit free from every lie"
        ),
        "promise_image": "/static/images/promises/truth-light.svg",
    },
}

DEFAULT_DEVOTIONAL_IMAGES = {
    Theme.PRESENCE: "/static/images/devotionals/presence/presence-default.svg",
    Theme.HEALING: "/static/images/devotionals/healing/healing-default.svg",
    Theme.TRUTH: "/static/images/devotionals/truth/truth-default.svg",
}


class DevotionalCorpus:
  """Read-only collection of devotionals, ordered per theme."""

  def __init__(self, devotionals: Iterable[Devotional]):
    self._by_theme = {}
    for devotional in devotionals:
      self._by_theme.setdefault(devotional.theme, []).append(devotional)

  @classmethod
  def from_json_data(cls, data: dict) -> "DevotionalCorpus":
    return cls(Devotional.from_dict(d) for d in data.get("devotionals", []))

  @classmethod
  def from_file(cls, filepath: str) -> "DevotionalCorpus":
    return cls.from_json_data(utils.load_json(filepath))

  def __len__(self) -> int:
    return sum(len(entries) for entries in self._by_theme.values())

  def count_for_theme(self, theme: Theme) -> int:
    """Number of corpus records tagged with theme."""
    return len(self._by_theme.get(theme, []))

  def raw_devotional(
      self, theme: Theme, theme_day: int
  ) -> Optional[Devotional]:
    """Returns the stored record for a 1-indexed day, without defaults."""
    entries = self._by_theme.get(theme, [])
    if not 1 <= theme_day <= len(entries):
      return None
    return entries[theme_day - 1]

  def devotional_for(
      self, theme: Theme, theme_day: int
  ) -> Optional[Devotional]:
    """Returns the devotional for theme and day, or None if there is none.

    Days outside [1, count_for_theme(theme)] are not found; they never wrap
    to another day's content.
    """
    base = self.raw_devotional(theme, theme_day)
    if base is None:
      return None
    return apply_defaults(base)

  def devotional_for_rotation_day(
      self, absolute_day: int
  ) -> Optional[Devotional]:
    theme, theme_day = rotation.rotation_day_from_absolute(absolute_day)
    return self.devotional_for(theme, theme_day)


def apply_defaults(devotional: Devotional) -> Devotional:
  """Fills empty promise and image fields from the theme's defaults."""
  promise = DEFAULT_PROMISES.get(devotional.theme, {})
  return dataclasses.replace(
      devotional,
      promise_for_the_day=(
          devotional.promise_for_the_day
          or promise.get("promise_for_the_day")
      ),
      promise_image=devotional.promise_image or promise.get("promise_image"),
      devotional_image=(
          devotional.devotional_image
          or DEFAULT_DEVOTIONAL_IMAGES.get(devotional.theme)
      ),
  )


@functools.lru_cache()
def get_corpus() -> DevotionalCorpus:
  """Loads the process-wide corpus once."""
  return DevotionalCorpus.from_file(utils.DEVOTIONALS_JSON_PATH)

