"""
Places Client - Google Places API Access
=========================================

Provides a unified interface for looking up places and their reviews.
Currently backed by the Google Places web service (JSON API).

USAGE:
    client = GooglePlacesClient()
    details = client.get_place_details("ChIJN1t_tDeuEmsRUsoyG83frY4")
    print(details["name"], len(details.get("reviews", [])))
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from ..config import get_settings
from ...domain.errors import NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

DETAIL_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "geometry",
    "types",
    "rating",
    "user_ratings_total",
    "price_level",
]

NOT_FOUND_STATUSES = {"NOT_FOUND", "ZERO_RESULTS"}


class PlaceDataProvider(ABC):
    """
    Abstract base class for map-data providers.
    Implement this interface to add new place backends.
    """

    @abstractmethod
    def get_place_details(self, place_id: str, include_reviews: bool = True) -> dict:
        """
        Return the raw place record (Places API ``result`` shape).

        Raises:
            NotFoundError: no place matches ``place_id``.
            UpstreamError: any other non-success status.
        """
        ...


class GooglePlacesClient(PlaceDataProvider):
    """
    Google Places web service client.

    Statuses NOT_FOUND and ZERO_RESULTS become NotFoundError; every other
    non-OK status (OVER_QUERY_LIMIT, REQUEST_DENIED, ...) becomes UpstreamError.
    Nothing is retried here.
    """

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.places.api_key
        self._base_url = settings.places.base_url
        self._language = settings.places.language
        self._timeout = settings.places.timeout_seconds
        self._session = session or requests.Session()

        if not self._api_key:
            logger.warning("No GOOGLE_PLACES_API_KEY set. Places requests will be denied.")

    def get_place_details(self, place_id: str, include_reviews: bool = True) -> dict:
        """Fetch place details, with reviews inline when requested."""
        fields = DETAIL_FIELDS + (["reviews"] if include_reviews else [])
        data = self._get("details", {
            "place_id": place_id,
            "fields": ",".join(fields),
        })
        return data.get("result") or {}

    def search_places(self, query: str, location: Optional[str] = None) -> List[dict]:
        """
        Text search for places.

        Args:
            query: Free text, e.g. "ramen shibuya".
            location: Optional "lat,lng" bias; searches a 5 km radius around it.
        """
        params = {"query": query}
        if location:
            params["location"] = location
            params["radius"] = "5000"

        data = self._get("textsearch", params)
        return data.get("results", [])

    def search_nearby(self, lat: float, lng: float, radius: int = 1000,
                      place_type: str = "restaurant") -> List[dict]:
        """Places of ``place_type`` around a point, for competitor comparison."""
        try:
            data = self._get("nearbysearch", {
                "location": f"{lat},{lng}",
                "radius": str(radius),
                "type": place_type,
            })
        except NotFoundError:
            return []
        return data.get("results", [])

    def _get(self, endpoint: str, params: dict) -> dict:
        """Call ``{base_url}/{endpoint}/json`` and check the status field."""
        url = f"{self._base_url}/{endpoint}/json"
        query = dict(params, key=self._api_key, language=self._language)

        try:
            response = self._session.get(url, params=query, timeout=self._timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            logger.warning(f"Places API timeout on {endpoint}")
            raise UpstreamError(f"Places API timeout: {e}", status="TIMEOUT") from e
        except requests.RequestException as e:
            logger.warning(f"Places API error on {endpoint}: {e}")
            raise UpstreamError(f"Places API error: {e}", status="HTTP_ERROR") from e
        except ValueError as e:
            raise UpstreamError(f"Places API returned invalid JSON: {e}", status="INVALID_JSON") from e

        status = data.get("status", "UNKNOWN")
        if status == "OK":
            return data

        if status in NOT_FOUND_STATUSES:
            logger.info(f"Places API {endpoint}: {status}")
            raise NotFoundError(f"No place found ({status})")

        message = data.get("error_message", "")
        logger.warning(f"Places API {endpoint} failed: {status} {message}")
        raise UpstreamError(f"Places API error: {status}", status=status)
