"""The seven-step daily reading flow and the reader's progress through it."""

import dataclasses

STEPS = (
    {"id": "welcome", "title": "Welcome"},
    {"id": "prepare", "title": "Prepare Your Heart"},
    {"id": "scripture", "title": "Scripture"},
    {"id": "teaching", "title": "Teaching"},
    {"id": "reflect", "title": "Soul Reflection"},
    {"id": "pray", "title": "Prayer & Action"},
    {"id": "blessing", "title": "Blessing"},
)

STEP_PROGRESS_KEY = "step_progress"


def devotional_key(theme, theme_day: int) -> str:
  """Identifies one devotional, e.g. "healing-3"."""
  return f"{getattr(theme, 'value', theme)}-{theme_day}"


@dataclasses.dataclass
class StepProgress:
  """Where the reader is in one devotional's steps."""

  devotional_key: str
  current: int = 0
  completed: set = dataclasses.field(default_factory=set)

  @property
  def current_step(self) -> dict:
    return STEPS[self.current]

  @property
  def is_last_step(self) -> bool:
    return self.current == len(STEPS) - 1

  def next_step(self):
    """Completes the current step and advances; a no-op on the last step."""
    if self.is_last_step:
      return
    self.completed.add(self.current)
    self.current += 1

  def previous_step(self):
    if self.current > 0:
      self.current -= 1

  def go_to(self, index: int):
    if not isinstance(index, int) or not 0 <= index < len(STEPS):
      raise ValueError(f"Invalid step index: {index!r}")
    self.current = index

  def to_dict(self) -> dict:
    return {
        "devotional_key": self.devotional_key,
        "current": self.current,
        "completed": sorted(self.completed),
    }

  def steps_with_status(self) -> list[dict]:
    return [
        dict(
            step,
            index=i,
            active=i == self.current,
            completed=i in self.completed,
        )
        for i, step in enumerate(STEPS)
    ]


def load_progress(store, key: str) -> StepProgress:
  """Returns saved progress for key, or a fresh start for a new devotional."""
  saved = store.get(STEP_PROGRESS_KEY) or {}
  if saved.get("devotional_key") != key:
    return StepProgress(devotional_key=key)
  current = saved.get("current", 0)
  if not isinstance(current, int) or not 0 <= current < len(STEPS):
    current = 0
  completed = {
      i
      for i in saved.get("completed", [])
      if isinstance(i, int) and 0 <= i < len(STEPS)
  }
  return StepProgress(devotional_key=key, current=current, completed=completed)


def save_progress(store, progress: StepProgress):
  store.set(STEP_PROGRESS_KEY, progress.to_dict())
