from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.api.localizacao.contracts.geolocalizacao_contract import IGeocodificacaoProvider
from app.api.localizacao.models.coordenadas import Coordenadas
from app.config import settings
from app.core.exceptions import ExternalServiceError
from app.utils.logger import logger


class NominatimResult(BaseModel):
    lat: float
    lon: float
    display_name: str = ""


class NominatimAdapter(IGeocodificacaoProvider):
    """Adapter para a busca do Nominatim (OpenStreetMap) - geocodificação por texto ou CEP."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def buscar_por_texto(self, consulta: str) -> List[Coordenadas]:
        return await self._search(
            {
                "q": consulta,
                "format": "json",
                "limit": 1,
                "countrycodes": "br",
            }
        )

    async def buscar_por_cep(self, cep: str) -> List[Coordenadas]:
        return await self._search(
            {
                "postalcode": cep,
                "country": "BR",
                "format": "json",
                "limit": 1,
            }
        )

    async def _search(self, params: Dict[str, Any]) -> List[Coordenadas]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"User-Agent": settings.HTTP_USER_AGENT},
            ) as client:
                response = await client.get(f"{self.base_url}/search", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Nominatim] Erro HTTP ao geocodificar {params}: Status {e.response.status_code}")
            raise ExternalServiceError("Nominatim", "Erro ao geocodificar endereço", e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[Nominatim] Erro ao geocodificar {params}: {e}")
            raise ExternalServiceError("Nominatim", "Erro ao geocodificar endereço") from e

        if not isinstance(data, list):
            raise ExternalServiceError("Nominatim", "Resposta inválida do geocodificador")

        try:
            resultados = [NominatimResult.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise ExternalServiceError("Nominatim", "Resultado sem coordenadas válidas") from e

        return [Coordenadas(latitude=r.lat, longitude=r.lon) for r in resultados]
