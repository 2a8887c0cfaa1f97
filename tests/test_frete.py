from decimal import Decimal

import pytest

from app.api.frete.services.service_frete import FreteService, ShippingPolicy
from app.api.localizacao.contracts.geolocalizacao_contract import (
    ICepProvider,
    IGeocodificacaoProvider,
    IRotaProvider,
)
from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.models.endereco_cep import EnderecoCep, RotaCalculada
from app.api.localizacao.services.geolocalizacao_service import GeolocalizacaoService
from app.api.localizacao.services.rota_service import RotaService
from app.core.exceptions import GeocodingError, NotFoundError, RoutingError, ValidationError

ESTOQUE = Coordenadas(latitude=-23.6947, longitude=-46.5558)
PAULISTA = Coordenadas(latitude=-23.5613, longitude=-46.6565)


class MockCepProvider(ICepProvider):
    def __init__(self, existe: bool = True):
        self.existe = existe
        self.chamadas = 0

    async def buscar_cep(self, cep: str) -> EnderecoCep:
        self.chamadas += 1
        if not self.existe:
            raise NotFoundError("CEP", cep)
        return EnderecoCep(
            cep="01310-100",
            logradouro="Avenida Paulista",
            bairro="Bela Vista",
            localidade="São Paulo",
            uf="SP",
        )


class MockGeocodificador(IGeocodificacaoProvider):
    def __init__(self, coords=PAULISTA):
        self.coords = coords

    async def buscar_por_texto(self, consulta: str):
        return [self.coords] if self.coords else []

    async def buscar_por_cep(self, cep: str):
        return []


class MockRota(IRotaProvider):
    def __init__(self, distance_meters: float = 15234.7, duration_seconds: float = 1520, falhar: bool = False):
        self.distance_meters = distance_meters
        self.duration_seconds = duration_seconds
        self.falhar = falhar

    async def calculate_route(self, origin, destination) -> RotaCalculada:
        if self.falhar:
            raise RoutingError("OSRM API error: 503")
        return RotaCalculada(distance_meters=self.distance_meters, duration_seconds=self.duration_seconds)


def _service(rota: MockRota = None, cep: MockCepProvider = None, geo: MockGeocodificador = None) -> FreteService:
    return FreteService(
        GeolocalizacaoService(cep or MockCepProvider(), geo or MockGeocodificador()),
        RotaService(rota or MockRota()),
        ShippingPolicy(origin=ESTOQUE),
    )


@pytest.mark.asyncio
async def test_frete_paulista_carrinho_50():
    cep_provider = MockCepProvider()
    quote = await _service(cep=cep_provider).calculate_shipping(cep="01310-100", cart_total=50)

    assert quote.distance_km == 15.23
    # 15.2347 km * 1.85 = 28.184...
    assert quote.shipping_cost == 28.18
    assert quote.estimated_time_minutes == 26
    assert quote.free_shipping is False
    assert quote.free_shipping_remaining == 250.0
    assert quote.delivery_address == "Avenida Paulista, Bela Vista, São Paulo - SP"
    # endereço resolvido uma única vez
    assert cep_provider.chamadas == 1


@pytest.mark.asyncio
async def test_frete_aplica_valor_minimo():
    quote = await _service(MockRota(distance_meters=2000, duration_seconds=300)).calculate_shipping(
        cep="01310100", cart_total=10
    )
    assert quote.shipping_cost == 10.0
    assert quote.estimated_time_minutes == 5


@pytest.mark.asyncio
@pytest.mark.parametrize("cart_total", [300, 300.0, "300.00", 1000])
async def test_frete_gratis_a_partir_do_limite(cart_total):
    quote = await _service().calculate_shipping(cep="01310100", cart_total=cart_total)
    assert quote.free_shipping is True
    assert quote.shipping_cost == 0
    assert quote.free_shipping_remaining == 0


@pytest.mark.asyncio
async def test_frete_quanto_falta_para_gratis():
    quote = await _service().calculate_shipping(cep="01310100", cart_total=123.45)
    assert quote.free_shipping_remaining == 176.55


@pytest.mark.asyncio
@pytest.mark.parametrize("distancia", [1.0, 5432.1, 15234.7, 33333.33, 49999.9])
async def test_frete_valores_com_duas_casas(distancia):
    quote = await _service(MockRota(distance_meters=distancia, duration_seconds=61)).calculate_shipping(
        cep="01310100", cart_total=0
    )
    for valor in (quote.distance_km, quote.shipping_cost, quote.free_shipping_remaining):
        assert round(valor, 2) == valor
    assert quote.shipping_cost >= 10.0
    assert quote.estimated_time_minutes == 2


@pytest.mark.asyncio
async def test_frete_usa_linha_reta_quando_rota_falha():
    service = _service(MockRota(falhar=True))
    quote = await service.calculate_shipping(cep="01310100", cart_total=50)

    linha_reta_km = RotaService.calculate_straight_line_distance(ESTOQUE, PAULISTA) / 1000
    assert quote.distance_km == pytest.approx(linha_reta_km * 1.3, abs=0.01)
    assert quote.estimated_time_minutes > 0
    assert quote.shipping_cost == pytest.approx(float(Decimal(str(quote.distance_km)) * Decimal("1.85")), abs=0.02)


@pytest.mark.asyncio
async def test_frete_cep_invalido():
    with pytest.raises(ValidationError):
        await _service().calculate_shipping(cep="abc", cart_total=10)


@pytest.mark.asyncio
async def test_frete_carrinho_negativo():
    with pytest.raises(ValidationError) as exc:
        await _service().calculate_shipping(cep="01310100", cart_total=-1)
    assert exc.value.field == "cart_total"


@pytest.mark.asyncio
@pytest.mark.parametrize("cart_total", ["abc", "NaN", float("nan"), "Infinity", None])
async def test_frete_carrinho_nao_numerico(cart_total):
    with pytest.raises(ValidationError) as exc:
        await _service().calculate_shipping(cep="01310100", cart_total=cart_total)
    assert exc.value.field == "cart_total"


@pytest.mark.asyncio
async def test_frete_cep_inexistente():
    with pytest.raises(NotFoundError):
        await _service(cep=MockCepProvider(existe=False)).calculate_shipping(cep="99999999", cart_total=10)


@pytest.mark.asyncio
async def test_frete_sem_coordenadas():
    with pytest.raises(GeocodingError):
        await _service(geo=MockGeocodificador(coords=None)).calculate_shipping(cep="01310100", cart_total=10)


def test_area_de_entrega():
    service = _service()
    assert service.is_within_delivery_area(50)
    assert not service.is_within_delivery_area(50.01)


def test_policy_vem_das_configuracoes():
    policy = ShippingPolicy.from_settings()
    assert policy.price_per_km == Decimal("1.85")
    assert policy.min_cost == Decimal("10.00")
    assert policy.free_shipping_threshold == Decimal("300.00")
