"""Fetches secrets from environment variables or Google Cloud Secret Manager."""

import logging
import os

from google.cloud import secretmanager

logger = logging.getLogger(__name__)

PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "presence-healing-truth")
_SECRET_VERSION = "latest"


def _get_secret(secret_name, environment_variable, version=_SECRET_VERSION):
  """Fetches a secret from environment variables or Google Cloud Secret Manager."""
  if os.getenv(environment_variable) is not None:
    return os.getenv(environment_variable)
  try:
    secret_id = (
        f"projects/{PROJECT_ID}/secrets/{secret_name}/versions/{version}"
    )
    client = secretmanager.SecretManagerServiceClient()
    response = client.access_secret_version(name=secret_id)
    return response.payload.data.decode("UTF-8")
  except Exception as e:
    logger.error("Failed to fetch secret: %s - Error: %s", secret_name, e)
    raise RuntimeError(f"Could not fetch secret {secret_name}") from e


def get_gemini_api_key():
  """Fetches the Gemini API key used by the reflection service."""
  return _get_secret("GEMINI_API_KEY", "GEMINI_API_KEY")


def get_flask_secret_key():
  """Fetches the Flask SECRET_KEY for session signing."""
  return _get_secret("FLASK_SECRET_KEY", "FLASK_SECRET_KEY")
