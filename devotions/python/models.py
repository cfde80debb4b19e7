"""Data models for the application."""

import dataclasses
import enum
from typing import Optional


class Theme(str, enum.Enum):
  """The devotional tracks.

  INTEGRATED is styled but has no rotation slot and no corpus entries.
  """

  PRESENCE = "presence"
  HEALING = "healing"
  TRUTH = "truth"
  INTEGRATED = "integrated"

  @property
  def display_name(self) -> str:
    return self.value.capitalize()

  @classmethod
  def parse(cls, value) -> Optional["Theme"]:
    """Returns the Theme for value, or None if it is not a known theme."""
    if isinstance(value, Theme):
      return value
    try:
      return cls(str(value).strip().lower())
    except ValueError:
      return None


@dataclasses.dataclass(frozen=True)
class ThemeStyle:
  """Display metadata for a theme."""

  name: str
  description: str
  color: str
  accent: str
  light_bg: str
  dark_bg: str


THEME_STYLES = {
    Theme.PRESENCE: ThemeStyle(
        name="Presence",
        description="God's nearness",
        color="#2D82B7",
        accent="#91C4F2",
        light_bg="#E1F1FF",
        dark_bg="#0A2E4A",
    ),
    Theme.HEALING: ThemeStyle(
        name="Healing",
        description="Restoration of heart and body",
        color="#3CAD72",
        accent="#9BDEBD",
        light_bg="#E6F7EF",
        dark_bg="#0A3B28",
    ),
    Theme.TRUTH: ThemeStyle(
        name="Truth",
        description="Revealing and replacing spiritual lies",
        color="#9E65A9",
        accent="#D4AEE3",
        light_bg="#F5E9F7",
        dark_bg="#37224D",
    ),
    Theme.INTEGRATED: ThemeStyle(
        name="Integrated",
        description="Combines all three",
        color="#CF7D34",
        accent="#F2C18F",
        light_bg="#FDF1E4",
        dark_bg="#48280F",
    ),
}


@dataclasses.dataclass(frozen=True)
class Scripture:
  reference: str
  text: str


@dataclasses.dataclass(frozen=True)
class Devotional:
  """One theme-day of reading material."""

  theme: Theme
  invocation: str
  scripture: Scripture
  reflection_prompt: str
  physical_action: str
  guided_prayer: str
  truth_to_carry: str
  benediction: str
  teaching: str
  insight: str
  promise_for_the_day: Optional[str] = None
  promise_image: Optional[str] = None
  devotional_image: Optional[str] = None

  @staticmethod
  def from_dict(data: dict) -> "Devotional":
    """Builds a record from a corpus entry (camelCase JSON keys)."""
    theme = Theme.parse(data.get("day"))
    if theme is None:
      raise ValueError(f"Unknown devotional theme: {data.get('day')!r}")
    scripture = data.get("scripture") or {}
    return Devotional(
        theme=theme,
        invocation=data.get("invocation", ""),
        scripture=Scripture(
            reference=scripture.get("reference", ""),
            text=scripture.get("text", ""),
        ),
        reflection_prompt=data.get("reflection", ""),
        physical_action=data.get("physicalAction", ""),
        guided_prayer=data.get("guidedPrayer", ""),
        truth_to_carry=data.get("truthToCarry", ""),
        benediction=data.get("benediction", ""),
        teaching=data.get("teaching", ""),
        insight=data.get("insight", ""),
        promise_for_the_day=data.get("promiseForTheDay") or None,
        promise_image=data.get("promiseImage") or None,
        devotional_image=(
            data.get("localPath") or data.get("devotionalImage") or None
        ),
    )

  def to_dict(self) -> dict:
    """Serializes to the JSON shape the front end reads."""
    return {
        "day": self.theme.value,
        "invocation": self.invocation,
        "scripture": {
            "reference": self.scripture.reference,
            "text": self.scripture.text,
        },
        "reflection": self.reflection_prompt,
        "physicalAction": self.physical_action,
        "guidedPrayer": self.guided_prayer,
        "truthToCarry": self.truth_to_carry,
        "benediction": self.benediction,
        "teaching": self.teaching,
        "insight": self.insight,
        "promiseForTheDay": self.promise_for_the_day,
        "promiseImage": self.promise_image,
        "devotionalImage": self.devotional_image,
    }


@dataclasses.dataclass(frozen=True)
class RotationInfo:
  """Display metadata for one position in the 93-day rotation."""

  absolute_day: int
  theme: Theme
  theme_day: int
  total_days: int
  theme_name: str
  progress: int

  def to_dict(self) -> dict:
    return {
        "absoluteDay": self.absolute_day,
        "theme": self.theme.value,
        "themeDay": self.theme_day,
        "totalDays": self.total_days,
        "themeName": self.theme_name,
        "progress": self.progress,
    }
