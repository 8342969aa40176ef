import logging
from functools import lru_cache

from google import genai
from google.genai import types

from menu_decoder.config import GEMINI_API_KEY, GEMINI_TIMEOUT_MS

logger = logging.getLogger(__name__)


@lru_cache
def get_gemini_client() -> genai.Client:
    if not GEMINI_API_KEY:
        raise RuntimeError("GEMINI_API_KEY is not set")
    logger.info("Initializing Gemini client (timeout_ms=%s)", GEMINI_TIMEOUT_MS)
    http_options = types.HttpOptions(timeout=GEMINI_TIMEOUT_MS) if GEMINI_TIMEOUT_MS > 0 else None
    return genai.Client(api_key=GEMINI_API_KEY, http_options=http_options)
