from fastapi import Depends

from app.api.frete.services.service_frete import FreteService
from app.api.localizacao.services.dependencies import get_geolocalizacao_service, get_rota_service
from app.api.localizacao.services.geolocalizacao_service import GeolocalizacaoService
from app.api.localizacao.services.rota_service import RotaService


def get_frete_service(
    geo_service: GeolocalizacaoService = Depends(get_geolocalizacao_service),
    rota_service: RotaService = Depends(get_rota_service),
) -> FreteService:
    return FreteService(geo_service, rota_service)
