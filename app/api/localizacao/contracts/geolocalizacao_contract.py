from abc import ABC, abstractmethod
from typing import List

from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.models.endereco_cep import EnderecoCep, RotaCalculada


class ICepProvider(ABC):
    """Interface para provedores de consulta de endereço por CEP (ViaCEP, etc)."""

    @abstractmethod
    async def buscar_cep(self, cep: str) -> EnderecoCep:
        """
        Busca o endereço de um CEP já limpo (8 dígitos).

        Raises:
            NotFoundError: o provedor informou que o CEP não existe
            ExternalServiceError: falha de rede ou resposta inesperada
        """
        pass


class IGeocodificacaoProvider(ABC):
    """Interface para provedores de geocodificação (Nominatim, Google Maps, etc)."""

    @abstractmethod
    async def buscar_por_texto(self, consulta: str) -> List[Coordenadas]:
        """
        Geocodifica um endereço em texto livre.

        Returns:
            Lista de coordenadas encontradas (vazia se não houver resultado)
        """
        pass

    @abstractmethod
    async def buscar_por_cep(self, cep: str) -> List[Coordenadas]:
        """Geocodifica apenas pelo código postal."""
        pass


class IRotaProvider(ABC):
    """Interface para provedores de cálculo de rota."""

    @abstractmethod
    async def calculate_route(self, origin: Coordenadas, destination: Coordenadas) -> RotaCalculada:
        """
        Calcula a rota de carro entre dois pontos.

        Raises:
            RoutingError: o serviço não retornou uma rota utilizável
        """
        pass
