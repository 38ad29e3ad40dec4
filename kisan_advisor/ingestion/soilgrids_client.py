"""
ISRIC SoilGrids client — topsoil pH and organic carbon.

API:   https://rest.isric.org/soilgrids/v2.0/properties/query
Docs:  https://rest.isric.org/soilgrids/v2.0/docs

No API key required.  The service is free but slow and occasionally
unavailable; callers should be ready to fall back to ``get_fixture_reading()``.

Query used::

    GET /properties/query?lon={lon}&lat={lat}
        &property=phh2o&property=soc&depth=0-5cm

Units:
  phh2o is reported as pH × 10 (e.g. 66 → pH 6.6), so the Q50 value is
  divided by 10.  soc is taken as-is as an organic carbon proxy in g/kg.
  Soil moisture is not part of SoilGrids; it is always ``None`` here.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Optional

import httpx

from kisan_advisor.models.readings import Coordinates, SoilReading

logger = logging.getLogger(__name__)


class SoilGridsClient:
    """Client for SoilGrids point queries.

    Usage (fixture / demo mode — no network)::

        client = SoilGridsClient()
        reading = client.get_fixture_reading()

    Usage (real API, inside an event loop)::

        async with httpx.AsyncClient() as http:
            reading = await SoilGridsClient().fetch(http, Coordinates(lat=28.6, lon=77.2))
    """

    BASE_URL: ClassVar[str] = "https://rest.isric.org/soilgrids/v2.0"
    DEPTH: ClassVar[str] = "0-5cm"
    SOURCE: ClassVar[str] = "SoilGrids"

    # Demo reading shown when the service cannot be reached.
    FIXTURE_READING: ClassVar[dict] = {
        "ph": 6.6,
        "moisture_percent": 58.0,
        "organic_carbon": 8.2,
        "source": "demo",
    }

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout

    # ── Real API ───────────────────────────────────────────────────────────────

    async def fetch(self, client: httpx.AsyncClient, coords: Coordinates) -> SoilReading:
        """Fetch topsoil pH and organic carbon for a point.

        Args:
            client: Shared async HTTP client.
            coords: Location to query.

        Returns:
            SoilReading with ``source="SoilGrids"``.

        Raises:
            httpx.HTTPStatusError: On non-2xx response.
            httpx.RequestError:    On connection failure or timeout.
            ValueError:            If the body is not a JSON object.
        """
        params = [
            ("lon", coords.lon),
            ("lat", coords.lat),
            ("property", "phh2o"),
            ("property", "soc"),
            ("depth", self.DEPTH),
        ]
        resp = await client.get(
            f"{self.base_url}/properties/query",
            params=params,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        reading = self.parse_response(resp.json())
        logger.debug("SoilGrids: ph=%s soc=%s at %s", reading.ph, reading.organic_carbon, coords)
        return reading

    # ── Response parser ────────────────────────────────────────────────────────

    @classmethod
    def parse_response(cls, data: Any) -> SoilReading:
        """Parse a /properties/query JSON body into a SoilReading.

        Missing layers or depth values leave the field ``None``.  A pH value
        of 0 is treated as missing.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected SoilGrids payload type: {type(data).__name__}")

        layers = (data.get("properties") or {}).get("layers") or []
        ph_raw = _layer_median(layers, "phh2o")
        soc    = _layer_median(layers, "soc")

        return SoilReading(
            ph=ph_raw / 10.0 if ph_raw else None,
            organic_carbon=soc,
            moisture_percent=None,
            source=cls.SOURCE,
        )

    # ── Fixture / demo mode ────────────────────────────────────────────────────

    def get_fixture_reading(self) -> SoilReading:
        """Return the demo soil reading (pH 6.6, 58% moisture, 8.2 g/kg SOC)."""
        return SoilReading(**self.FIXTURE_READING)


def _layer_median(layers: list[dict], name: str) -> Optional[float]:
    """Q50 of the first depth of the named layer, or ``None``."""
    layer = next((lyr for lyr in layers if lyr.get("name") == name), None)
    if layer is None:
        return None
    depths = layer.get("depths") or []
    if not depths:
        return None
    value = (depths[0].get("values") or {}).get("Q50")
    return None if value is None else float(value)
