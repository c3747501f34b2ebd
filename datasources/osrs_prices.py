"""
OSRS Wiki real-time price API client.

Fetches the latest instant-buy (high) and instant-sell (low) prices for a
single item id.
"""

import logging
from typing import Any, Dict, Optional

import requests
from datasources.http import DEFAULT_USER_AGENT, get_shared_session
from engine.models import PriceTriple

DEFAULT_BASE_URL = "https://prices.runescape.wiki/api/v1/osrs"
DEFAULT_TIMEOUT = 10


class PriceAPIError(Exception):
    """Custom exception for price API errors."""
    pass


class PriceAPIClient:
    """Client for the ``/latest`` endpoint of the OSRS Wiki price API."""

    def __init__(self, config: Optional[Dict[str, Any]] = None, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: application config; the ``api`` section is read
            session: HTTP session to use instead of the per-thread shared one
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)

        api_config = self.config.get('api', {})
        self.base_url = api_config.get('base_url', DEFAULT_BASE_URL).rstrip('/')
        self.timeout = api_config.get('timeout_seconds', DEFAULT_TIMEOUT)
        self.user_agent = api_config.get('user_agent', DEFAULT_USER_AGENT)
        self._session = session

    @property
    def session(self) -> requests.Session:
        return self._session or get_shared_session(self.user_agent)

    def _make_request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make a request to the price API with error handling."""
        try:
            self.logger.debug(f"Making request to {url} with params {params}")
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Request failed: {e}")
            raise PriceAPIError(f"API request failed: {e}") from e

        if response.status_code != 200:
            raise PriceAPIError(f"bad status: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Failed to parse JSON response: {e}")
            raise PriceAPIError(f"Invalid JSON response: {e}") from e

    def get_latest(self, item_id: int) -> PriceTriple:
        """
        Get the latest price triple for one item.

        Raises:
            PriceAPIError: request failed or the item has no high/low price
        """
        data = self._make_request(f"{self.base_url}/latest", params={'id': item_id})

        rows = data.get('data') if isinstance(data, dict) else None
        row = rows.get(str(item_id)) if isinstance(rows, dict) else None
        if not row:
            raise PriceAPIError(f"no price returned for id={item_id}")

        high, low = row.get('high'), row.get('low')
        if high is None or low is None:
            raise PriceAPIError(f"no high/low price returned for id={item_id}")

        triple = PriceTriple.from_high_low(int(high), int(low))
        self.logger.info(f"Latest id={item_id}: high={triple.high} low={triple.low} avg={triple.avg}")
        return triple
