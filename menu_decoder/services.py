"""Menu extraction via the Gemini multimodal API."""

import logging
from functools import lru_cache
from typing import List, Optional

from google import genai
from google.genai import types

from menu_decoder.config import GEMINI_MODEL
from menu_decoder.errors import EmptyAIResponseError
from menu_decoder.gemini_client import get_gemini_client
from menu_decoder.prompts import MENU_EXTRACTION_PROMPT
from menu_decoder.schemas import Dish
from menu_decoder.utils import parse_dish_array

logger = logging.getLogger(__name__)

# Every harm category at BLOCK_NONE: menu photos trip false-positive blocks otherwise
RELAXED_SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
    for category in (
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    )
]


class MenuExtractor:
    """Turns a menu photo into a list of dishes (``images`` left unset)."""

    def __init__(self, client: Optional[genai.Client] = None, model: str = GEMINI_MODEL):
        self.client = client
        self.model = (model or GEMINI_MODEL).strip()

    def _client(self) -> genai.Client:
        # Process-wide client unless one was injected
        return self.client or get_gemini_client()

    def extract(self, image_bytes: bytes, mime_type: str) -> List[Dish]:
        """
        Single Gemini call, no retries.

        The SDK sends the image as a base64 inline_data part together with
        the extraction prompt.

        Raises:
            EmptyAIResponseError: no candidates / blocked / empty text
            InvalidAIResponseError: text is not a JSON array
        """
        logger.info(
            "Sending %.1fkb %s image to model=%s",
            len(image_bytes) / 1024,
            mime_type,
            self.model,
        )

        response = self._client().models.generate_content(
            model=self.model,
            contents=[
                MENU_EXTRACTION_PROMPT,
                types.Part.from_bytes(data=image_bytes, mime_type=mime_type),
            ],
            config=types.GenerateContentConfig(safety_settings=RELAXED_SAFETY_SETTINGS),
        )

        if response is None or not response.candidates:
            feedback = getattr(response, "prompt_feedback", None)
            raise EmptyAIResponseError(
                "AI failed to return a valid response "
                f"(block_reason={getattr(feedback, 'block_reason', None)})"
            )

        text = response.text or ""
        if not text.strip():
            raise EmptyAIResponseError(
                "AI returned an empty response "
                f"(finish_reason={getattr(response.candidates[0], 'finish_reason', None)})"
            )

        logger.info("Gemini response received, length: %s", len(text))
        logger.debug("Gemini raw response: %s", text)

        dishes = parse_dish_array(text)
        logger.info("Parsed %s dishes from Gemini response", len(dishes))
        return dishes


@lru_cache
def get_menu_extractor() -> MenuExtractor:
    return MenuExtractor()
