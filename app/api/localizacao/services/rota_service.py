from __future__ import annotations

import math

from app.api.localizacao.contracts.geolocalizacao_contract import IRotaProvider
from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.models.endereco_cep import RotaCalculada

EARTH_RADIUS_KM = 6371.0


def calculate_straight_line_distance(origin: Coordenadas, destination: Coordenadas) -> float:
    """Distância em linha reta (Haversine) entre dois pontos, em metros."""
    phi1, phi2 = math.radians(origin.latitude), math.radians(destination.latitude)
    d_phi = math.radians(destination.latitude - origin.latitude)
    d_lambda = math.radians(destination.longitude - origin.longitude)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000


class RotaService:
    """Estimativa de rota: caminho roteado e distância em linha reta, chamados separadamente."""

    def __init__(self, rota_provider: IRotaProvider):
        self.rota_provider = rota_provider

    async def calculate_route(self, origin: Coordenadas, destination: Coordenadas) -> RotaCalculada:
        return await self.rota_provider.calculate_route(origin, destination)

    @staticmethod
    def calculate_straight_line_distance(origin: Coordenadas, destination: Coordenadas) -> float:
        return calculate_straight_line_distance(origin, destination)
