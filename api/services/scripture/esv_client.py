# api/services/scripture/esv_client.py
"""
ESV API client (api.esv.org).

Fetches plain passage text with inline verse numbers. No caching or
retrying happens here: ScriptureService owns the cache and quota, and a
provider failure is raised straight to the caller.
"""

import logging
import os
from typing import Optional

import requests

from core.config import ESV_API_URL, ESV_REQUEST_TIMEOUT

from .errors import NotConfigured, NotFound, ProviderUnavailable

logger = logging.getLogger(__name__)


class EsvClient:
    """
    Client for the ESV passage text endpoint.

    Usage:
        client = EsvClient()
        text = client.get_passage("John 3:16")
    """

    def __init__(self, api_token: Optional[str] = None, session: Optional[requests.Session] = None):
        self._api_token = api_token
        self.base_url = ESV_API_URL
        self.session = session or requests.Session()
        self._request_timeout = ESV_REQUEST_TIMEOUT

    @property
    def api_token(self) -> Optional[str]:
        return self._api_token or os.getenv("ESV_API_TOKEN")

    def is_configured(self) -> bool:
        return bool(self.api_token)

    def _params(self, reference: str) -> dict:
        return {
            "q": reference,
            "include-headings": "false",
            "include-footnotes": "false",
            "include-verse-numbers": "true",
            "include-short-copyright": "false",
            "include-passage-references": "false",
        }

    def get_passage(self, reference: str) -> str:
        """
        Fetch passage text for a reference.

        Args:
            reference: Human-readable reference, passed to the API as written

        Returns:
            Passage text, stripped

        Raises:
            NotConfigured: ESV_API_TOKEN is not set
            ProviderUnavailable: Network failure or non-2xx response
            NotFound: The API returned no passages
        """
        token = self.api_token
        if not token:
            raise NotConfigured("ESV API token not configured")

        clean_reference = reference.strip()

        try:
            logger.debug(f"Fetching {clean_reference} from ESV API")
            response = self.session.get(
                self.base_url,
                params=self._params(clean_reference),
                headers={"Authorization": f"Token {token}"},
                timeout=self._request_timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Network error fetching {clean_reference} from ESV API: {e}")
            raise ProviderUnavailable(f"ESV API request failed: {e}") from e

        if not response.ok:
            logger.warning(f"ESV API returned {response.status_code} for {clean_reference}")
            raise ProviderUnavailable(f"ESV API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderUnavailable(f"ESV API returned invalid JSON: {e}") from e

        passages = data.get("passages") or []
        if not passages or not passages[0].strip():
            raise NotFound(f"Scripture text not found: {clean_reference}")

        return passages[0].strip()
