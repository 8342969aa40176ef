"""Utility functions."""

import json
import logging
import re
from typing import List

from pydantic import ValidationError

from menu_decoder.errors import InvalidAIResponseError
from menu_decoder.schemas import Dish

logger = logging.getLogger(__name__)

# ```json / ```JSON / bare ``` at the very start, and ``` at the very end
_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """
    Remove surrounding whitespace and an enclosing markdown code fence.

    Gemini is told not to wrap its answer in markdown but sometimes does.
    Only the outermost fence pair is removed; text inside is left untouched.
    """
    if not text:
        return ""

    cleaned = text.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_dish_array(text: str) -> List[Dish]:
    """
    Parse model output into validated dishes.

    Raises InvalidAIResponseError if the cleaned text is not JSON or is not a
    JSON array. Individual entries that do not look like a dish are skipped.
    """
    cleaned = strip_code_fences(text)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InvalidAIResponseError(f"Model output is not valid JSON: {e}") from e

    if not isinstance(parsed, list):
        raise InvalidAIResponseError(
            f"Model output is a JSON {type(parsed).__name__}, expected an array"
        )

    dishes: List[Dish] = []
    for index, item in enumerate(parsed):
        if not isinstance(item, dict):
            logger.warning("Skipping dish #%s: expected an object, got %s", index, type(item).__name__)
            continue

        fields = {key: value for key, value in item.items() if key != "images"}
        try:
            dishes.append(Dish.model_validate(fields))
        except ValidationError as e:
            logger.warning("Skipping dish #%s (%r): %s", index, item.get("name"), e.errors())

    return dishes
