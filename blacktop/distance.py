"""
Distance resolver — one-way miles from the shop to the job site.

The lookup itself is an injected collaborator (DistanceLookup). The
resolver never lets a lookup failure reach the estimate: timeouts, HTTP
errors, bad payloads and a missing API key all fall back to the default
distance (50 miles).
"""

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Dict, Protocol, Tuple

from .config import settings
from .schemas import ProjectDetails

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.344
DEFAULT_DISTANCE_MILES = 50.0


class DistanceLookupError(Exception):
    """The distance lookup could not produce a distance."""


class DistanceLookup(Protocol):
    def resolve_distance(self, from_address: str, to_address: str) -> float:
        ...


class FixedDistanceLookup:
    """Always returns the same distance. For tests and offline use."""

    def __init__(self, miles: float):
        self.miles = miles
        self.calls = 0

    def resolve_distance(self, from_address: str, to_address: str) -> float:
        self.calls += 1
        return self.miles


class GoogleDistanceMatrixLookup:
    """Driving distance from the Google Distance Matrix API."""

    def __init__(self, api_key: str = None, api_url: str = None, timeout: float = None):
        self.api_key = settings.DISTANCE_API_KEY if api_key is None else api_key
        self.api_url = api_url or settings.DISTANCE_API_URL
        self.timeout = settings.DISTANCE_TIMEOUT_SECONDS if timeout is None else timeout

    def _build_url(self, from_address: str, to_address: str) -> str:
        query = urllib.parse.urlencode({
            "origins": from_address,
            "destinations": to_address,
            "units": "imperial",
            "key": self.api_key,
        })
        return "%s?%s" % (self.api_url, query)

    def resolve_distance(self, from_address: str, to_address: str) -> float:
        if not self.api_key:
            raise DistanceLookupError("DISTANCE_API_KEY not configured")

        req = urllib.request.Request(
            self._build_url(from_address, to_address),
            headers={"Accept": "application/json"},
            method="GET",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                payload = json.loads(response.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            raise DistanceLookupError("Distance API HTTP %s" % e.code) from e
        except (urllib.error.URLError, TimeoutError, OSError, ValueError) as e:
            raise DistanceLookupError("Distance API unreachable: %s" % e) from e

        return self._parse_miles(payload)

    def _parse_miles(self, payload: dict) -> float:
        if payload.get("status") != "OK":
            raise DistanceLookupError("Distance API status %s" % payload.get("status"))
        try:
            element = payload["rows"][0]["elements"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise DistanceLookupError("Malformed distance response") from e
        if element.get("status") != "OK":
            raise DistanceLookupError("No route: %s" % element.get("status"))
        meters = element.get("distance", {}).get("value")
        if meters is None:
            raise DistanceLookupError("Malformed distance response")
        return round(meters / METERS_PER_MILE, 1)


class DistanceResolver:
    """
    Resolves and memoises distances for its own lifetime.

    Build one per request (or per batch); it holds no state worth sharing.
    """

    def __init__(self, lookup: DistanceLookup, base_address: str,
                 default_miles: float = DEFAULT_DISTANCE_MILES):
        self.lookup = lookup
        self.base_address = base_address
        self.default_miles = default_miles
        self._cache = {}  # type: Dict[Tuple[str, str], float]

    def distance_to(self, to_address: str) -> float:
        key = (self.base_address, to_address)
        if key in self._cache:
            return self._cache[key]

        try:
            miles = float(self.lookup.resolve_distance(self.base_address, to_address))
            if miles < 0:
                raise DistanceLookupError("Negative distance %.1f" % miles)
        except Exception as e:
            # Distance moves the price but must never block the estimate
            logger.warning(
                "Distance lookup failed for %r, using default %.0f miles: %s",
                to_address, self.default_miles, e,
            )
            miles = self.default_miles

        self._cache[key] = miles
        return miles

    def resolve_for(self, project: ProjectDetails) -> float:
        """
        Fill in project.location.distance_from_base when it is unknown.

        This is the one mutation the estimate pipeline makes. A distance
        already on the project (0 included) is left alone.
        """
        location = project.location
        if location.distance_from_base is None:
            location.distance_from_base = self.distance_to(location.address)
            logger.info("Resolved distance to %r: %.1f miles",
                        location.address, location.distance_from_base)
        return location.distance_from_base


def default_resolver(base_address: str, default_miles: float = DEFAULT_DISTANCE_MILES) -> DistanceResolver:
    """Resolver backed by the configured Google Distance Matrix lookup."""
    return DistanceResolver(GoogleDistanceMatrixLookup(), base_address, default_miles)
