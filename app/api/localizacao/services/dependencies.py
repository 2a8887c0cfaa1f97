from functools import lru_cache

from app.api.localizacao.adapters.nominatim_adapter import NominatimAdapter
from app.api.localizacao.adapters.osrm_adapter import OsrmAdapter
from app.api.localizacao.adapters.viacep_adapter import ViaCepAdapter
from app.api.localizacao.services.geolocalizacao_service import GeolocalizacaoService
from app.api.localizacao.services.rota_service import RotaService


@lru_cache(maxsize=1)
def _get_geolocalizacao_service_instance() -> GeolocalizacaoService:
    """Cria uma instância singleton do serviço de geolocalização."""
    return GeolocalizacaoService(
        cep_provider=ViaCepAdapter(),
        geocodificacao_provider=NominatimAdapter(),
    )


def get_geolocalizacao_service() -> GeolocalizacaoService:
    """Dependency para obter serviço de geolocalização (singleton)."""
    return _get_geolocalizacao_service_instance()


@lru_cache(maxsize=1)
def _get_rota_service_instance() -> RotaService:
    return RotaService(rota_provider=OsrmAdapter())


def get_rota_service() -> RotaService:
    """Dependency para obter serviço de rotas (singleton)."""
    return _get_rota_service_instance()
