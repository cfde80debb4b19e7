"""Main Flask application for serving the devotional rotation."""

import datetime
import os

import flask

import devotional_service
from models import THEME_STYLES, Theme
import reading_steps
import reflection
import rotation
import rotation_refresher
import secrets_fetcher
import session_state
import utils

NOT_FOUND_MESSAGE = "Failed to load devotional. Please try again."

app = flask.Flask(
    __name__,
    template_folder=utils.TEMPLATE_DIR,
    static_folder=utils.STATIC_DIR,
)
app.secret_key = secrets_fetcher.get_flask_secret_key()

calendar_day = rotation_refresher.CalendarDay(
    rotation.current_absolute_day_for_quarter(utils.local_now().date())
)
refresher = rotation_refresher.RotationRefresher(calendar_day.set)
if utils.env_flag("ROTATION_REFRESH_ENABLED", default=True):
  refresher.start()


def get_corpus():
  """Returns the corpus, preferring one injected through app.config."""
  corpus = app.config.get("CORPUS")
  if corpus is None:
    corpus = devotional_service.get_corpus()
  return corpus


def get_reading_state():
  """Builds the reader's state from the session for this request."""
  return session_state.ReadingState(
      session_state.SessionPreferenceStore(),
      get_corpus(),
      utils.local_now().date(),
  )


def _parse_theme_or_404(theme_name):
  theme = Theme.parse(theme_name)
  if theme not in rotation.THEME_CYCLE:
    flask.abort(404)
  return theme


def _render_not_found(retry_url):
  return (
      flask.render_template(
          "error.html", error_message=NOT_FOUND_MESSAGE, retry_url=retry_url
      ),
      404,
  )


def _render_devotional(state, devotional, step_day, **extra):
  key = reading_steps.devotional_key(devotional.theme, step_day)
  progress = reading_steps.load_progress(state.store, key)
  return flask.render_template(
      "devotional.html",
      devotional=devotional,
      style=THEME_STYLES[devotional.theme],
      steps=progress.steps_with_status(),
      current_step=progress.current_step,
      devotional_key=key,
      step_day=step_day,
      reflection_fallback=reflection.FALLBACK_RESPONSE,
      **extra,
  )


@app.context_processor
def inject_preferences():
  """Makes dark mode and theme styles available to every template."""
  return {
      "dark_mode": session_state.SessionPreferenceStore().get(
          session_state.DARK_MODE_KEY, False
      ),
      # Keyed by plain theme name for template lookups.
      "theme_styles": {t.value: s for t, s in THEME_STYLES.items()},
  }


@app.route("/")
def index_route():
  """Shows the landing page once, then goes straight to today's reading."""
  state = get_reading_state()
  if state.has_seen_landing:
    return flask.redirect(flask.url_for("rotation_route"))
  return flask.render_template(
      "landing.html", rotation_cycle=rotation.THEME_CYCLE
  )


@app.route("/start", methods=["POST"])
def start_route():
  """Marks the landing page as seen."""
  get_reading_state().mark_landing_seen()
  return flask.redirect(flask.url_for("rotation_route"))


@app.route("/about")
def about_route():
  """Returns the about page HTML."""
  return flask.render_template("about.html")


@app.route("/rotation")
def rotation_route():
  """Returns the devotional for the reader's rotation day."""
  state = get_reading_state()
  selection = state.sync_rotation(calendar_day.day)
  info = rotation.rotation_info_from_absolute(selection.day)
  devotional = get_corpus().devotional_for_rotation_day(info.absolute_day)
  if devotional is None:
    app.logger.warning(
        "No devotional for rotation day %d (%s %d)",
        info.absolute_day,
        info.theme.value,
        info.theme_day,
    )
    return _render_not_found(flask.url_for("rotation_route"))
  return _render_devotional(
      state,
      devotional,
      info.theme_day,
      rotation_info=info,
      days_remaining=rotation.days_remaining(info.absolute_day),
      pinned=selection.pinned,
      date_str=state.today.strftime("%A, %B %d, %Y"),
  )


@app.route("/rotation/<direction>", methods=["POST"])
def navigate_rotation_route(direction):
  """Moves the rotation day by hand and pins it for this session."""
  try:
    get_reading_state().navigate_rotation(direction, calendar_day.day)
  except ValueError:
    flask.abort(400)
  return flask.redirect(flask.url_for("rotation_route"))


@app.route("/theme/<theme_name>")
def theme_route(theme_name):
  """Switches to a single theme, starting from today's day of month."""
  theme = _parse_theme_or_404(theme_name)
  state = get_reading_state()
  state.set_theme(theme)
  return flask.redirect(
      flask.url_for(
          "theme_day_route", theme_name=theme.value, day=state.day_number
      )
  )


@app.route("/theme/<theme_name>/<int:day>")
def theme_day_route(theme_name, day):
  """Returns one day of a single theme's sequence."""
  theme = _parse_theme_or_404(theme_name)
  state = get_reading_state()
  if state.current_theme != theme:
    state.set_theme(theme)
  devotional = get_corpus().devotional_for(theme, day)
  if devotional is None:
    return _render_not_found(
        flask.url_for("theme_route", theme_name=theme.value)
    )
  state.set_day_number(day)
  return _render_devotional(
      state,
      devotional,
      day,
      theme_day=day,
      total_days=state.total_days_for_theme,
  )


@app.route("/theme/navigate/<direction>", methods=["POST"])
def navigate_theme_route(direction):
  """Moves within the current theme, wrapping at either end."""
  state = get_reading_state()
  try:
    day = state.navigate_theme_day(direction)
  except ValueError:
    flask.abort(400)
  return flask.redirect(
      flask.url_for(
          "theme_day_route", theme_name=state.current_theme.value, day=day
      )
  )


@app.route("/api/rotation")
def api_rotation_route():
  """Returns rotation info and devotional for the reader's day as JSON."""
  selection = get_reading_state().sync_rotation(calendar_day.day)
  return _rotation_json(selection.day, pinned=selection.pinned)


@app.route("/api/rotation/<int(signed=True):day>")
def api_rotation_day_route(day):
  """Returns rotation info and devotional for any absolute day as JSON."""
  return _rotation_json(day)


def _rotation_json(day, pinned=None):
  info = rotation.rotation_info_from_absolute(day)
  devotional = get_corpus().devotional_for_rotation_day(info.absolute_day)
  payload = {
      "rotation": info.to_dict(),
      "daysRemaining": rotation.days_remaining(info.absolute_day),
      "devotional": devotional.to_dict() if devotional else None,
  }
  if pinned is not None:
    payload["pinned"] = pinned
  if devotional is None:
    payload["error"] = NOT_FOUND_MESSAGE
    return flask.jsonify(payload), 404
  return flask.jsonify(payload)


@app.route("/api/devotional/<theme_name>/<int(signed=True):day>")
def api_devotional_route(theme_name, day):
  """Returns one theme-day devotional as JSON."""
  theme = Theme.parse(theme_name)
  if theme is None:
    return flask.jsonify({"error": "Unknown theme"}), 404
  corpus = get_corpus()
  devotional = corpus.devotional_for(theme, day)
  if devotional is None:
    return flask.jsonify({"error": NOT_FOUND_MESSAGE}), 404
  return flask.jsonify({
      "devotional": devotional.to_dict(),
      "themeDay": day,
      "totalDays": corpus.count_for_theme(theme),
  })


@app.route("/api/themes")
def api_themes_route():
  """Returns theme styles and corpus counts."""
  corpus = get_corpus()
  return flask.jsonify([
      {
          "theme": theme.value,
          "name": style.name,
          "description": style.description,
          "color": style.color,
          "accent": style.accent,
          "lightBg": style.light_bg,
          "darkBg": style.dark_bg,
          "totalDays": corpus.count_for_theme(theme),
          "inRotation": theme in rotation.THEME_CYCLE,
      }
      for theme, style in THEME_STYLES.items()
  ])


@app.route("/api/steps/<action>", methods=["POST"])
def api_steps_route(action):
  """Advances, rewinds or jumps within a devotional's reading steps."""
  data = flask.request.get_json(silent=True) or {}
  theme = Theme.parse(data.get("theme"))
  theme_day = data.get("theme_day")
  if theme is None or not isinstance(theme_day, int):
    return flask.jsonify({"error": "theme and theme_day are required"}), 400

  store = session_state.SessionPreferenceStore()
  progress = reading_steps.load_progress(
      store, reading_steps.devotional_key(theme, theme_day)
  )
  if action == "next":
    progress.next_step()
  elif action == "previous":
    progress.previous_step()
  elif action == "goto":
    try:
      progress.go_to(data.get("index"))
    except ValueError as e:
      return flask.jsonify({"error": str(e)}), 400
  else:
    return flask.jsonify({"error": f"Unknown action: {action}"}), 400
  reading_steps.save_progress(store, progress)

  return flask.jsonify(
      dict(progress.to_dict(), steps=progress.steps_with_status())
  )


@app.route("/api/reflection", methods=["POST"])
def api_reflection_route():
  """Returns an insight, blessing and prayer for the reader's reflection."""
  data = flask.request.get_json(silent=True) or {}
  fields = ("reflection", "theme", "scripture")
  if not all(isinstance(data.get(f), str) and data[f].strip() for f in fields):
    return (
        flask.jsonify({
            "error": "Missing required fields: reflection, theme, scripture"
        }),
        400,
    )
  return flask.jsonify(
      reflection.generate_reflection_response(
          data["reflection"].strip(), data["theme"].strip(), data["scripture"]
      )
  )


@app.route("/save_dark_mode", methods=["POST"])
def save_dark_mode_route():
  """Saves dark mode preference for this browser."""
  data = flask.request.get_json(silent=True) or {}
  dark_mode_enabled = data.get("dark_mode")
  if isinstance(dark_mode_enabled, bool):
    get_reading_state().set_dark_mode(dark_mode_enabled)
    return flask.jsonify({"success": True})
  return flask.jsonify({"success": False, "error": "Invalid data"}), 400


@app.route("/toggle_dark_mode", methods=["POST"])
def toggle_dark_mode_route():
  """Flips dark mode from the page header and returns to the page."""
  get_reading_state().toggle_dark_mode()
  return flask.redirect(flask.request.referrer or flask.url_for("index_route"))


@app.route("/api/health")
def health_route():
  return flask.jsonify({
      "status": "ok",
      "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
      "devotionals_loaded": len(get_corpus()),
      "calendar_day": calendar_day.day,
      "model": utils.GEMINI_MODEL,
  })


if __name__ == "__main__":
  app.run(debug=True, host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
