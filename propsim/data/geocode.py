"""Address geocoding via the GSI address search API (free, no key needed)."""

import logging
from dataclasses import dataclass
from decimal import Decimal

import httpx

from propsim.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoLocation:
    query: str
    matched_address: str
    latitude: Decimal
    longitude: Decimal


async def geocode_address(raw_address: str) -> GeoLocation:
    """Geocode a Japanese address string.

    Returns the first match. Raises ValueError when nothing matches.
    """
    async with httpx.AsyncClient(timeout=settings.geocoder_timeout) as client:
        resp = await client.get(settings.geocoder_url, params={"q": raw_address})
        resp.raise_for_status()
        data = resp.json()

    if not data:
        raise ValueError(f"Could not geocode address: {raw_address}")

    match = data[0]
    # GeoJSON order: [lon, lat]
    lon, lat = match["geometry"]["coordinates"][:2]
    return GeoLocation(
        query=raw_address,
        matched_address=match.get("properties", {}).get("title", raw_address),
        latitude=Decimal(str(lat)),
        longitude=Decimal(str(lon)),
    )


async def try_geocode(raw_address: str) -> GeoLocation | None:
    """Geocode, logging and returning None on any lookup failure."""
    if not raw_address.strip():
        logger.debug("Empty address, skipping geocode")
        return None
    try:
        return await geocode_address(raw_address)
    except (httpx.HTTPError, ValueError, KeyError, IndexError) as e:
        logger.warning("Geocode failed for %s: %s", raw_address, e)
        return None
