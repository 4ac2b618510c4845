import logging
from typing import Any, Dict, List, Optional

import requests

from chat_config import (
    CONTENT_API_TOKEN,
    CONTENT_API_URL,
    CONTENT_TIMEOUT,
    CONTENT_WHITELABEL_ID,
)

logger = logging.getLogger(__name__)


class ContentLibraryClient:
    """
    Read-only client for the Strapi-style content library.

    The list is fetched once and cached for the life of the process; a failed
    fetch is not cached so the next call retries.
    """

    def __init__(
        self,
        url: str = CONTENT_API_URL,
        token: Optional[str] = CONTENT_API_TOKEN,
        whitelabel_id: str = CONTENT_WHITELABEL_ID,
        timeout: float = CONTENT_TIMEOUT,
    ):
        self.url = url.rstrip("/")
        self.token = token
        self.whitelabel_id = whitelabel_id
        self.timeout = timeout
        self._items: Optional[List[Dict[str, Any]]] = None
        self._categories: List[Dict[str, Any]] = []
        self._details: Dict[str, Dict[str, Any]] = {}

    def headers(self) -> Dict[str, str]:
        headers = {"whitelabel-id": self.whitelabel_id}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    @property
    def categories(self) -> List[Dict[str, Any]]:
        return self._categories

    def fetch_library(self) -> List[Dict[str, Any]]:
        if self._items is not None:
            return self._items
        try:
            resp = requests.get(self.url, headers=self.headers(), timeout=self.timeout)
            resp.raise_for_status()
            items = resp.json().get("data") or []
            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                raise ValueError(f"unexpected data payload of type {type(items).__name__}")
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.error(f"Content library fetch failed: {e}")
            return []

        self._items = items
        self._categories = unique_categories(items)
        logger.info(f"Loaded {len(items)} content items in {len(self._categories)} categories")
        return items

    def fetch_detail(self, document_id: str) -> Optional[Dict[str, Any]]:
        if document_id in self._details:
            return self._details[document_id]
        try:
            resp = requests.get(f"{self.url}/{document_id}", headers=self.headers(), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Content detail fetch failed for {document_id}: {e}")
            return None

        item = data.get("data", data) if isinstance(data, dict) else None
        if not isinstance(item, dict):
            logger.warning(f"Content detail for {document_id} has no usable payload")
            return None
        self._details[document_id] = item
        return item

    def clear_cache(self) -> None:
        self._items = None
        self._categories = []
        self._details = {}


def unique_categories(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Distinct categories by slug, in first-seen order."""
    seen: Dict[str, Dict[str, Any]] = {}
    for item in items:
        category = item.get("category")
        if isinstance(category, dict) and category.get("slug") and category["slug"] not in seen:
            seen[category["slug"]] = category
    return list(seen.values())


content_client = ContentLibraryClient()
