"""Cliente HTTP do serviço de rotas OSRM."""

from __future__ import annotations

from typing import List, Optional

import httpx
from pydantic import BaseModel

from app.api.localizacao.contracts.geolocalizacao_contract import IRotaProvider
from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.models.endereco_cep import RotaCalculada
from app.config import settings
from app.core.exceptions import RoutingError
from app.utils.logger import logger


class OsrmRoute(BaseModel):
    distance: float
    duration: float


class OsrmRouteResponse(BaseModel):
    code: str
    routes: List[OsrmRoute] = []


class OsrmAdapter(IRotaProvider):
    def __init__(
        self,
        base_url: str | None = None,
        profile: str = "driving",
        *,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.OSRM_BASE_URL).rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def calculate_route(self, origin: Coordenadas, destination: Coordenadas) -> RotaCalculada:
        url = f"{self.base_url}/route/v1/{self.profile}/{origin.to_osrm()};{destination.to_osrm()}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"User-Agent": settings.HTTP_USER_AGENT},
            ) as client:
                response = await client.get(url, params={"overview": "false"})
            response.raise_for_status()
            payload = OsrmRouteResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            raise RoutingError(f"OSRM API error: {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise RoutingError(f"OSRM request failed: {e}") from e

        if payload.code != "Ok" or not payload.routes:
            logger.warning("[OSRM] Rota não encontrada | code=%s url=%s", payload.code, url)
            raise RoutingError("Não foi possível calcular a rota")

        route = payload.routes[0]
        return RotaCalculada(distance_meters=route.distance, duration_seconds=route.duration)
