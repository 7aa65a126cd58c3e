from __future__ import annotations

import json
import logging
from typing import Dict

import requests


NOTION_VERSION = "2022-06-28"
NOTION_API_URL = "https://api.notion.com/v1"

logger = logging.getLogger(__name__)


class NotionClient:
    def __init__(self, token: str, *, timeout: float = 30.0) -> None:
        """Initialize a session configured with the integration token."""

        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}"
                ,"Notion-Version": NOTION_VERSION
                ,"Content-Type": "application/json"
            }
        )

    def create_page(self, payload: Dict) -> Dict:
        """Create a page via the Notion API and return the response body."""

        url = f"{NOTION_API_URL}/pages"
        response = self.session.post(url, data=json.dumps(payload), timeout=self.timeout)
        try:
            response.raise_for_status()
        except requests.HTTPError as err:
            logger.error("Notion create failed: %s", response.text)
            raise err
        return response.json()
