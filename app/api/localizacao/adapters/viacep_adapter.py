from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.api.localizacao.contracts.geolocalizacao_contract import ICepProvider
from app.api.localizacao.models.endereco_cep import EnderecoCep
from app.config import settings
from app.core.exceptions import ExternalServiceError, NotFoundError
from app.utils.logger import logger


class ViaCepAdapter(ICepProvider):
    """Adapter para a API pública do ViaCEP."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.VIACEP_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def buscar_cep(self, cep: str) -> EnderecoCep:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                headers={"User-Agent": settings.HTTP_USER_AGENT},
            ) as client:
                response = await client.get(f"{self.base_url}/{cep}/json/")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[ViaCEP] Erro na API para CEP {cep}: Status {e.response.status_code}")
            raise ExternalServiceError("ViaCEP", "Erro ao buscar CEP", e.response.status_code) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[ViaCEP] Erro ao consultar CEP {cep}: {e}")
            raise ExternalServiceError("ViaCEP", "Erro ao buscar CEP") from e

        # O ViaCEP responde 200 com {"erro": true} para CEP inexistente
        if isinstance(data, dict) and str(data.get("erro", "")).lower() == "true":
            logger.info(f"[ViaCEP] CEP não encontrado: {cep}")
            raise NotFoundError("CEP", cep)

        try:
            return EnderecoCep.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"[ViaCEP] Resposta inesperada para CEP {cep}: {data}")
            raise ExternalServiceError("ViaCEP", "Resposta inválida do ViaCEP") from e
