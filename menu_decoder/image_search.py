"""Best-effort dish photos from the Pexels search API."""

import logging
from functools import lru_cache
from typing import Any, List, Optional

import requests

from menu_decoder.config import (
    IMAGE_QUERY_SUFFIX,
    IMAGE_SEARCH_TIMEOUT_S,
    IMAGES_PER_DISH,
    PEXELS_API_KEY,
    PEXELS_SEARCH_URL,
)

logger = logging.getLogger(__name__)

# Preferred size first
SIZE_PREFERENCE = ("medium", "large", "original")


def build_query(dish_name: Optional[str]) -> str:
    return f"{(dish_name or '').strip()} {IMAGE_QUERY_SUFFIX}".strip()


def _pick_url(photo: Any) -> Optional[str]:
    if not isinstance(photo, dict):
        return None
    sizes = photo.get("src")
    if not isinstance(sizes, dict):
        return None
    for size in SIZE_PREFERENCE:
        url = sizes.get(size)
        if isinstance(url, str) and url:
            return url
    return None


class PexelsImageSearch:
    """
    Never raises: any failure (network, non-2xx, odd JSON) returns [].
    Safe to call concurrently; holds no per-call state.
    """

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        url: str = PEXELS_SEARCH_URL,
        timeout: float = IMAGE_SEARCH_TIMEOUT_S,
    ):
        self.api_key = api_key
        self.session = session or requests
        self.url = url
        self.timeout = timeout

    def search(self, dish_name: Optional[str]) -> List[str]:
        if not self.api_key:
            logger.warning("PEXELS_API_KEY is not set, skipping image search")
            return []

        query = build_query(dish_name)
        try:
            response = self.session.get(
                self.url,
                params={
                    "query": query,
                    "per_page": IMAGES_PER_DISH,
                    "orientation": "landscape",
                },
                headers={"Authorization": self.api_key},
                timeout=self.timeout or None,
            )
        except requests.RequestException as e:
            logger.error("Image search request failed for %r: %s", query, e)
            return []

        if not response.ok:
            logger.error("Image search for %r returned HTTP %s", query, response.status_code)
            return []

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Image search for %r returned invalid JSON: %s", query, e)
            return []

        photos = data.get("photos") if isinstance(data, dict) else None
        if not isinstance(photos, list):
            logger.error("Image search for %r returned no photo list", query)
            return []

        urls = [url for url in map(_pick_url, photos) if url]
        return urls[:IMAGES_PER_DISH]


@lru_cache
def get_image_search() -> PexelsImageSearch:
    return PexelsImageSearch(PEXELS_API_KEY)
