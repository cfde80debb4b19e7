"""Recomputes the calendar rotation day at every local midnight."""

import datetime
import logging
import threading

import rotation
import utils

logger = logging.getLogger(__name__)


def seconds_until_midnight(now: datetime.datetime) -> float:
  """Seconds from an aware datetime until the next local midnight."""
  tz = now.tzinfo
  tomorrow = now.date() + datetime.timedelta(days=1)
  midnight = datetime.datetime(tomorrow.year, tomorrow.month, tomorrow.day)
  if hasattr(tz, "localize"):
    midnight = tz.localize(midnight)
  else:
    midnight = midnight.replace(tzinfo=tz)
  return max((midnight - now).total_seconds(), 0.0)


class CalendarDay:
  """Process-wide holder for the calendar-driven rotation day."""

  def __init__(self, day: int):
    self._lock = threading.Lock()
    self._day = day

  @property
  def day(self) -> int:
    with self._lock:
      return self._day

  def set(self, day: int):
    with self._lock:
      self._day = day


class RotationRefresher:
  """Fires on_refresh(day) at every local midnight."""

  def __init__(self, on_refresh, tz_name: str = None, clock=None):
    self.on_refresh = on_refresh
    self.tz_name = tz_name
    self.clock = clock or (lambda: utils.local_now(self.tz_name))
    self._timer = None
    self._lock = threading.Lock()
    self._stopped = True

  def refresh(self) -> int:
    """Computes today's rotation day and hands it to on_refresh."""
    day = rotation.current_absolute_day_for_quarter(self.clock().date())
    logger.info("Calendar rotation day refreshed to %d", day)
    self.on_refresh(day)
    return day

  def _schedule(self, delay: float):
    with self._lock:
      if self._stopped:
        return
      self._timer = threading.Timer(delay, self._fire)
      self._timer.daemon = True
      self._timer.start()

  def _fire(self):
    try:
      self.refresh()
    except Exception as e:
      logger.error("Rotation refresh failed: %s", e, exc_info=True)
    # Recomputed each time so DST changes keep the timer on local midnight.
    self._schedule(seconds_until_midnight(self.clock()))

  def start(self):
    with self._lock:
      self._stopped = False
    self._schedule(seconds_until_midnight(self.clock()))

  def stop(self):
    with self._lock:
      self._stopped = True
      if self._timer is not None:
        self._timer.cancel()
        self._timer = None
