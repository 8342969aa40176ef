import os


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]


# -----------------------------------
# Credentials
# -----------------------------------

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
PEXELS_API_KEY = os.getenv("PEXELS_API_KEY")

# -----------------------------------
# Request validation
# -----------------------------------

# ALLOWED_ORIGINS: comma-separated list of origins allowed to call /api/analyze-menu.
# Requests without an Origin header are rejected as well.
ALLOWED_ORIGINS = _parse_origins(os.getenv("ALLOWED_ORIGINS", "http://localhost:3000"))

MENU_FIELD_NAME = "menu"
MAX_UPLOAD_BYTES = 6 * 1024 * 1024
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

# -----------------------------------
# Gemini configuration
# -----------------------------------

# GEMINI_MODEL: multimodal model used for menu extraction
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# GEMINI_TIMEOUT_MS: HTTP timeout for the extraction call (0 = SDK default, no bound)
GEMINI_TIMEOUT_MS = int(os.getenv("GEMINI_TIMEOUT_MS", "60000"))

# -----------------------------------
# Image search (Pexels)
# -----------------------------------

PEXELS_SEARCH_URL = os.getenv("PEXELS_SEARCH_URL", "https://api.pexels.com/v1/search")
IMAGE_SEARCH_TIMEOUT_S = float(os.getenv("IMAGE_SEARCH_TIMEOUT_S", "10"))
IMAGE_QUERY_SUFFIX = "food"
IMAGES_PER_DISH = 4

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
