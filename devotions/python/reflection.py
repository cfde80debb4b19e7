"""Turns a reader's reflection into an insight, blessing and prayer.

The text is sent to the Gemini generateContent endpoint. Any failure falls
back to three fixed sentences so the reader always gets a response.
"""

import json
import logging
import re

import requests
import secrets_fetcher as secrets
import utils

logger = logging.getLogger(__name__)

GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)
REQUEST_TIMEOUT = 30

FALLBACK_RESPONSE = {
    "insight": "Thank you for sharing your reflection.",
    "blessing": "May God continue to guide your journey.",
    "prayer": "Lord, bless this moment of reflection.",
}

TRUSTED_VOICES = {
    "truth": (
        "John Lennox, C.S. Lewis, Amy Orr-Ewing, Tim Keller,\n"
        "     - Rebecca McLaughlin, Alister McGrath, Nancy Pearcey,\n"
        "     - Os Guinness, N.T. Wright, William Lane Craig"
    ),
    "healing": (
        "Henri Nouwen, Brennan Manning, John Eldredge,\n"
        "     - Dan Allender, Sheila Walsh, Jackie Hill Perry,\n"
        "     - Leanne Payne, Sue Detweiler, Mark Yaconelli"
    ),
    "presence": (
        "Brother Lawrence, Dallas Willard, A.W. Tozer,\n"
        "     - Richard Foster, Thomas Merton, Julian of Norwich,\n"
        "     - Eugene Peterson, Jean Vanier, Sarah Clarkson"
    ),
}

BLESSING_FOCUS = {
    "presence": "awareness of God's presence",
    "healing": "divine restoration",
    "truth": "embracing truth",
}

REFLECTION_PROMPT = """You are a deeply spiritual, contemplative guide who responds to personal reflections with wisdom, gentleness, and profound insight. The user has shared a reflection based on the theme of **{theme}** and Scripture: "{scripture}". Here is their reflection: {reflection}.

Your task is to provide three responses that form a cohesive spiritual response:

1. **Spiritual Insight** (40-60 words):
   - Draw a connection between their reflection and the scripture
   - Include wisdom from one of these trusted voices on {theme}:
     - {voices}
   - Offer a fresh perspective that deepens their understanding

2. **Celtic-Style Blessing** (4-6 lines):
   - Write a poetic blessing that speaks to their specific reflection
   - Use nature imagery and Celtic Christian rhythms
   - Make it personal and specific to their journey
   - Focus on {focus}

3. **Contemplative Prayer**:
  Write a personal, Spirit-led prayer **to God** on behalf of the user, based on what they expressed in their journal or drawing.
- Speak to the heart of their specific experience: their emotion, longing, doubt, fear, or praise.
- Refer to what they are seeking or struggling with.
- Invite God into their actual story and situation.
- Use gentle, biblical language of nearness, comfort, trust, or truth.
- Keep it short: 3-5 sincere, heartfelt sentences

Format your response as valid JSON with these three fields. Keep each response concise and focused.

Example:
{{
  "insight": "Your awareness of God's presence in nature reflects...",
  "blessing": "May your growing sensitivity to God's presence...",
  "prayer": "Father, continue to open my eyes to..."
}}"""


class ReflectionUpstreamError(Exception):
  """The language model could not be reached or answered unusably."""


def build_prompt(reflection: str, theme: str, scripture: str) -> str:
  """Fills the prompt template; unknown themes use the presence voices."""
  return REFLECTION_PROMPT.format(
      theme=theme,
      scripture=scripture,
      reflection=reflection,
      voices=TRUSTED_VOICES.get(theme, TRUSTED_VOICES["presence"]),
      focus=BLESSING_FOCUS.get(theme, BLESSING_FOCUS["truth"]),
  )


def clean_model_text(text: str) -> str:
  """Strips a ```json fence the model sometimes wraps its answer in."""
  text = re.sub(r"^```(?:json)?\s*\n", "", text.strip())
  text = re.sub(r"\n```$", "", text)
  return text.strip()


def parse_reflection_response(text: str) -> dict:
  """Parses the model's JSON, filling missing fields with the fallbacks."""
  try:
    parsed = json.loads(clean_model_text(text or "{}"))
  except json.JSONDecodeError as e:
    raise ReflectionUpstreamError(f"Invalid JSON from model: {e}") from e
  if not isinstance(parsed, dict):
    raise ReflectionUpstreamError("Model response is not a JSON object")
  return {
      key: (parsed.get(key) if isinstance(parsed.get(key), str) else None)
      or fallback
      for key, fallback in FALLBACK_RESPONSE.items()
  }


def _call_gemini(prompt: str, api_key: str, model: str) -> str:
  """Posts the prompt and returns the first candidate's text."""
  try:
    response = requests.post(
        GEMINI_URL.format(model=model),
        headers={"x-goog-api-key": api_key},
        json={
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.7,
                "responseMimeType": "application/json",
            },
        },
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    data = response.json()
  except requests.exceptions.RequestException as e:
    raise ReflectionUpstreamError(f"Error calling Gemini API: {e}") from e
  except ValueError as e:
    raise ReflectionUpstreamError(f"Non-JSON Gemini response: {e}") from e

  try:
    parts = data["candidates"][0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)
  except (KeyError, IndexError, TypeError) as e:
    raise ReflectionUpstreamError(f"Unexpected Gemini payload: {e}") from e


def generate_reflection_response(
    reflection: str, theme: str, scripture: str, model: str = None
) -> dict:
  """Returns {"insight", "blessing", "prayer"}; never raises upstream errors."""
  try:
    try:
      api_key = secrets.get_gemini_api_key()
    except RuntimeError as e:
      raise ReflectionUpstreamError("Gemini API key is not configured") from e
    text = _call_gemini(
        build_prompt(reflection, theme, scripture),
        api_key,
        model or utils.GEMINI_MODEL,
    )
    return parse_reflection_response(text)
  except ReflectionUpstreamError as e:
    logger.error("Error generating reflection response: %s", e)
    return dict(FALLBACK_RESPONSE)
