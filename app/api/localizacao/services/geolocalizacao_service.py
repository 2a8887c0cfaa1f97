from typing import Optional

from app.api.localizacao.contracts.geolocalizacao_contract import (
    ICepProvider,
    IGeocodificacaoProvider,
)
from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.models.endereco_cep import EnderecoCep
from app.core.exceptions import GeocodingError
from app.utils.cep import validar_cep
from app.utils.logger import logger


class GeolocalizacaoService:
    """
    Resolve um CEP em endereço postal e em coordenadas.

    Fluxo de geocodificação:
    1. Endereço completo via provedor de CEP (ViaCEP)
    2. Busca em texto livre no geocodificador
    3. Sem resultados: nova busca apenas pelo código postal
    4. Ainda sem resultados: GeocodingError
    """

    def __init__(
        self,
        cep_provider: ICepProvider,
        geocodificacao_provider: IGeocodificacaoProvider,
    ):
        self.cep_provider = cep_provider
        self.geocodificacao_provider = geocodificacao_provider

    async def get_address_from_cep(self, cep: str) -> EnderecoCep:
        """Busca o endereço de um CEP. Levanta ValidationError ou NotFoundError."""
        cep_limpo = validar_cep(cep)
        return await self.cep_provider.buscar_cep(cep_limpo)

    async def geocode_cep(self, cep: str, endereco: Optional[EnderecoCep] = None) -> Coordenadas:
        """
        Converte um CEP em coordenadas.

        Args:
            cep: CEP com ou sem máscara
            endereco: endereço já resolvido para o CEP (evita nova consulta ao ViaCEP)
        """
        cep_limpo = validar_cep(cep)
        if endereco is None:
            endereco = await self.cep_provider.buscar_cep(cep_limpo)

        consulta = endereco.consulta_geocodificacao()
        resultados = await self.geocodificacao_provider.buscar_por_texto(consulta)
        if resultados:
            return resultados[0]

        logger.info(f"[Geolocalizacao] Sem resultados para '{consulta}', tentando apenas pelo CEP {cep_limpo}")
        resultados = await self.geocodificacao_provider.buscar_por_cep(cep_limpo)
        if resultados:
            return resultados[0]

        logger.warning(f"[Geolocalizacao] Não foi possível geocodificar o CEP {cep_limpo}")
        raise GeocodingError("Não foi possível encontrar as coordenadas para este CEP")
