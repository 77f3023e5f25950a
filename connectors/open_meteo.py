import httpx
from typing import Any, Dict, Optional

from engine.exceptions import UpstreamError

CURRENT_FIELDS = "temperature_2m,precipitation,cloud_cover,wind_speed_10m,shortwave_radiation,is_day"


class OpenMeteoConnector:
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = str(base_url).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def current(self, latitude: float, longitude: float) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "timezone": "auto",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.base_url, params=params)
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(f"Open-Meteo request failed [{e.response.status_code}]") from e
        except httpx.TimeoutException as e:
            raise UpstreamError("Open-Meteo request timed out") from e
        except httpx.RequestError as e:
            raise UpstreamError(f"Cannot reach Open-Meteo at {self.base_url}") from e
        except ValueError as e:
            raise UpstreamError("Open-Meteo returned a non-JSON body") from e

        current = body.get("current") if isinstance(body, dict) else None
        if not isinstance(current, dict):
            raise UpstreamError("Open-Meteo response has no 'current' block")
        return current
