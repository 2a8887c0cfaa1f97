from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Tuple

from app.api.frete.schemas.schema_frete import ShippingQuote
from app.api.localizacao.models.coordenadas import Coordenadas
from app.api.localizacao.services.geolocalizacao_service import GeolocalizacaoService
from app.api.localizacao.services.rota_service import RotaService
from app.config import settings
from app.core.exceptions import RoutingError, ValidationError
from app.utils.cep import validar_cep
from app.utils.logger import logger
from app.utils.prometheus_metrics import shipping_quotes_total, shipping_route_fallback_total

DUAS_CASAS = Decimal("0.01")


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _quantizar(value: Decimal) -> float:
    return float(value.quantize(DUAS_CASAS, rounding=ROUND_HALF_UP))


@dataclass(frozen=True, slots=True)
class ShippingPolicy:
    """Parâmetros de precificação do frete."""

    origin: Coordenadas
    price_per_km: Decimal = Decimal("1.85")
    min_cost: Decimal = Decimal("10.00")
    free_shipping_threshold: Decimal = Decimal("300.00")
    average_speed_km_h: float = 30.0
    route_inflation_factor: float = 1.3
    max_distance_km: float = 50.0

    @classmethod
    def from_settings(cls) -> "ShippingPolicy":
        return cls(
            origin=Coordenadas(
                latitude=settings.WAREHOUSE_LATITUDE,
                longitude=settings.WAREHOUSE_LONGITUDE,
            ),
            price_per_km=settings.SHIPPING_PRICE_PER_KM,
            min_cost=settings.SHIPPING_MIN_COST,
            free_shipping_threshold=settings.SHIPPING_FREE_THRESHOLD,
            average_speed_km_h=settings.SHIPPING_AVERAGE_SPEED_KM_H,
            route_inflation_factor=settings.SHIPPING_ROUTE_INFLATION_FACTOR,
            max_distance_km=settings.SHIPPING_MAX_DISTANCE_KM,
        )


class FreteService:
    """Calcula o frete a partir do estoque até o CEP de entrega."""

    def __init__(
        self,
        geo_service: GeolocalizacaoService,
        rota_service: RotaService,
        policy: ShippingPolicy | None = None,
    ):
        self.geo_service = geo_service
        self.rota_service = rota_service
        self.policy = policy or ShippingPolicy.from_settings()

    async def calculate_shipping(self, *, cep: str, cart_total) -> ShippingQuote:
        """
        Calcula distância, custo, prazo e quanto falta para o frete grátis.

        Erros de CEP/geocodificação sobem para o chamador; falhas de rota
        caem no cálculo em linha reta.
        """
        cep_limpo = validar_cep(cep)
        try:
            total = _dec(cart_total)
        except (InvalidOperation, TypeError, ValueError) as e:
            raise ValidationError("Valor do carrinho inválido", field="cart_total", value=cart_total) from e
        if not total.is_finite() or total < 0:
            raise ValidationError("Valor do carrinho inválido", field="cart_total", value=cart_total)

        endereco = await self.geo_service.get_address_from_cep(cep_limpo)
        destino = await self.geo_service.geocode_cep(cep_limpo, endereco=endereco)

        distance_meters, duration_seconds = await self._estimar_rota(destino)
        distance_km = _dec(distance_meters) / 1000

        shipping_cost = distance_km * self.policy.price_per_km
        if shipping_cost < self.policy.min_cost:
            shipping_cost = self.policy.min_cost

        free_shipping = total >= self.policy.free_shipping_threshold
        if free_shipping:
            shipping_cost = Decimal("0")
            remaining = Decimal("0")
        else:
            remaining = max(Decimal("0"), self.policy.free_shipping_threshold - total)

        quote = ShippingQuote(
            distance_km=_quantizar(distance_km),
            shipping_cost=_quantizar(shipping_cost),
            estimated_time_minutes=math.ceil(duration_seconds / 60),
            free_shipping=free_shipping,
            free_shipping_remaining=_quantizar(remaining),
            delivery_address=endereco.endereco_entrega(),
        )
        shipping_quotes_total.labels(free_shipping=str(free_shipping).lower()).inc()
        logger.info(
            "[FreteService] Frete calculado | cep=%s distancia_km=%s custo=%s prazo_min=%s",
            cep_limpo,
            quote.distance_km,
            quote.shipping_cost,
            quote.estimated_time_minutes,
        )
        return quote

    def is_within_delivery_area(self, distance_km: float) -> bool:
        return distance_km <= self.policy.max_distance_km

    async def _estimar_rota(self, destino: Coordenadas) -> Tuple[float, float]:
        """Rota real via serviço de rotas; em caso de RoutingError usa linha reta."""
        try:
            rota = await self.rota_service.calculate_route(self.policy.origin, destino)
            return rota.distance_meters, rota.duration_seconds
        except RoutingError as e:
            logger.warning(f"[FreteService] Roteamento falhou, usando cálculo em linha reta: {e}")
            shipping_route_fallback_total.inc()
            return self._estimar_rota_linha_reta(destino)

    def _estimar_rota_linha_reta(self, destino: Coordenadas) -> Tuple[float, float]:
        # +30% (padrão) para compensar o traçado das ruas
        distance_meters = (
            self.rota_service.calculate_straight_line_distance(self.policy.origin, destino)
            * self.policy.route_inflation_factor
        )
        duration_seconds = (distance_meters / 1000) / self.policy.average_speed_km_h * 3600
        return distance_meters, duration_seconds
