from __future__ import annotations

from typing import Callable, Dict, List

from app.api.pagamentos.adapters.greenpag_adapter import GreenPagAdapter, GreenPagConfig
from app.api.pagamentos.contracts.payment_gateway_contract import IPaymentGateway
from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode
from app.config import settings
from app.utils.logger import logger

GatewayFactory = Callable[[], IPaymentGateway]


class PaymentGatewayRegistry:
    """Mapa nome -> factory de adapters de gateway. Montado uma vez na inicialização."""

    def __init__(self) -> None:
        self._factories: Dict[str, GatewayFactory] = {}

    def register(self, name: str, factory: GatewayFactory) -> None:
        self._factories[name.lower()] = factory

    def available(self) -> List[str]:
        return sorted(self._factories)

    def create(self, name: str) -> IPaymentGateway:
        factory = self._factories.get((name or "").lower())
        if factory is None:
            logger.warning(
                f"[Pagamentos] Gateway '{name}' não registrado. Disponíveis: {', '.join(self.available()) or 'nenhum'}"
            )
            raise PaymentError(
                f"Gateway de pagamento '{name}' não está disponível",
                PaymentErrorCode.GATEWAY_UNAVAILABLE,
                {"gateway": name, "available": self.available()},
            )

        try:
            return factory()
        except ValueError as e:
            logger.error(f"[Pagamentos] Gateway '{name}' mal configurado: {e}")
            raise PaymentError(
                f"Gateway de pagamento '{name}' não está configurado",
                PaymentErrorCode.GATEWAY_UNAVAILABLE,
                {"gateway": name},
            ) from e


def _greenpag_factory() -> IPaymentGateway:
    return GreenPagAdapter(
        GreenPagConfig(
            api_url=settings.GREENPAG_API_URL,
            public_key=settings.GREENPAG_PUBLIC_KEY or "",
            secret_key=settings.GREENPAG_SECRET_KEY or "",
            timeout=settings.GREENPAG_TIMEOUT_SECONDS,
        )
    )


def build_payment_gateway_registry() -> PaymentGatewayRegistry:
    registry = PaymentGatewayRegistry()
    registry.register(GreenPagAdapter.name, _greenpag_factory)
    return registry
