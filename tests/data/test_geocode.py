"""Tests for the GSI address geocoder."""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from propsim.data.geocode import GeoLocation, geocode_address, try_geocode

ADDRESS = "東京都新宿区西新宿2-8-1"

GSI_RESPONSE = [
    {
        "geometry": {"coordinates": [139.691711, 35.689488], "type": "Point"},
        "type": "Feature",
        "properties": {"addressCode": "", "title": "東京都新宿区西新宿二丁目"},
    },
    {
        "geometry": {"coordinates": [139.7, 35.7], "type": "Point"},
        "type": "Feature",
        "properties": {"addressCode": "", "title": "東京都新宿区"},
    },
]


def _mock_client(json_data=None, get_side_effect=None):
    """Patch httpx.AsyncClient so `async with` yields a client with a canned GET."""
    resp = MagicMock()
    resp.json.return_value = json_data
    resp.raise_for_status.return_value = None

    client = MagicMock()
    client.get = AsyncMock(return_value=resp, side_effect=get_side_effect)

    patcher = patch("propsim.data.geocode.httpx.AsyncClient")
    client_cls = patcher.start()
    client_cls.return_value.__aenter__.return_value = client
    return patcher, client


@pytest.fixture
def gsi_ok():
    patcher, client = _mock_client(GSI_RESPONSE)
    yield client
    patcher.stop()


@pytest.fixture
def gsi_empty():
    patcher, client = _mock_client([])
    yield client
    patcher.stop()


@pytest.fixture
def gsi_down():
    patcher, client = _mock_client(get_side_effect=httpx.ConnectError("connection refused"))
    yield client
    patcher.stop()


# ── geocode_address ──────────────────────────────────────────────

class TestGeocodeAddress:
    async def test_first_match(self, gsi_ok):
        location = await geocode_address(ADDRESS)
        assert location == GeoLocation(
            query=ADDRESS,
            matched_address="東京都新宿区西新宿二丁目",
            latitude=Decimal("35.689488"),
            longitude=Decimal("139.691711"),
        )

    async def test_sends_query_param(self, gsi_ok):
        await geocode_address(ADDRESS)
        _, kwargs = gsi_ok.get.call_args
        assert kwargs["params"] == {"q": ADDRESS}

    async def test_no_match_raises(self, gsi_empty):
        with pytest.raises(ValueError):
            await geocode_address(ADDRESS)


# ── try_geocode ──────────────────────────────────────────────────

class TestTryGeocode:
    async def test_success(self, gsi_ok):
        location = await try_geocode(ADDRESS)
        assert location is not None
        assert location.latitude == Decimal("35.689488")

    async def test_no_match_returns_none(self, gsi_empty):
        assert await try_geocode(ADDRESS) is None

    async def test_network_error_returns_none(self, gsi_down, caplog):
        assert await try_geocode(ADDRESS) is None
        assert "Geocode failed" in caplog.text

    async def test_blank_skips_lookup(self):
        with patch("propsim.data.geocode.geocode_address", new_callable=AsyncMock) as mock_geocode:
            assert await try_geocode("   ") is None
            mock_geocode.assert_not_called()

    async def test_malformed_payload_returns_none(self):
        with patch(
            "propsim.data.geocode.geocode_address",
            new_callable=AsyncMock,
            side_effect=KeyError("geometry"),
        ):
            assert await try_geocode(ADDRESS) is None
