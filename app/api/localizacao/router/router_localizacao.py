from fastapi import APIRouter, Depends, Path, status

from app.api.localizacao.models.endereco_cep import EnderecoCep
from app.api.localizacao.services.dependencies import get_geolocalizacao_service
from app.api.localizacao.services.geolocalizacao_service import GeolocalizacaoService
from app.utils.cep import format_cep
from app.utils.logger import logger


router = APIRouter(
    prefix="/api/localizacao",
    tags=["Localização"]
)


@router.get("/cep/{cep}", response_model=EnderecoCep, status_code=status.HTTP_200_OK)
async def buscar_endereco_por_cep(
    cep: str = Path(..., description="CEP com ou sem máscara"),
    geo_service: GeolocalizacaoService = Depends(get_geolocalizacao_service),
):
    """
    Busca o endereço postal de um CEP.

    Retorna 400 para CEP malformado e 404 para CEP inexistente.
    """
    logger.info(f"[Localizacao] Buscando endereço para CEP {cep}")
    return await geo_service.get_address_from_cep(cep)


@router.get("/cep/{cep}/coordenadas", status_code=status.HTTP_200_OK)
async def geocodificar_cep(
    cep: str = Path(..., description="CEP com ou sem máscara"),
    geo_service: GeolocalizacaoService = Depends(get_geolocalizacao_service),
):
    """Geocodifica um CEP retornando latitude/longitude."""
    logger.info(f"[Localizacao] Geocodificando CEP {cep}")
    coords = await geo_service.geocode_cep(cep)
    return {
        "cep": format_cep(cep),
        "latitude": coords.latitude,
        "longitude": coords.longitude,
    }
