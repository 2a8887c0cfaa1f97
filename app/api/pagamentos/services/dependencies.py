from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional

from fastapi import Depends

from app.api.pagamentos.adapters.registry import build_payment_gateway_registry
from app.api.pagamentos.contracts.payment_gateway_contract import (
    IPaymentGateway,
    PaymentResult,
    PaymentStatus,
)
from app.api.pagamentos.repositories.repo_status_pagamento import StatusPagamentoRepository
from app.api.pagamentos.services.create_payment_use_case import CreatePaymentUseCase
from app.api.pagamentos.services.process_webhook_use_case import ProcessWebhookUseCase
from app.config import settings
from app.utils.logger import logger


@lru_cache(maxsize=1)
def _get_payment_gateway_instance() -> IPaymentGateway:
    """Cria o adapter do gateway padrão uma única vez."""
    registry = build_payment_gateway_registry()
    gateway = registry.create(settings.DEFAULT_PAYMENT_GATEWAY)
    logger.info(f"[Pagamentos] Gateway padrão configurado: {gateway.name}")
    return gateway


def get_payment_gateway() -> IPaymentGateway:
    """Dependency para obter o gateway de pagamento (singleton)."""
    return _get_payment_gateway_instance()


@lru_cache(maxsize=1)
def _get_status_repository_instance() -> StatusPagamentoRepository:
    return StatusPagamentoRepository()


def get_status_pagamento_repository() -> StatusPagamentoRepository:
    return _get_status_repository_instance()


def get_create_payment_use_case(
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    repo: StatusPagamentoRepository = Depends(get_status_pagamento_repository),
) -> CreatePaymentUseCase:
    async def on_payment_created(result: PaymentResult, order_id: str) -> None:
        repo.salvar(
            transaction_id=result.transaction_id,
            status=result.status,
            amount=result.amount,
            external_id=order_id,
        )

    return CreatePaymentUseCase(gateway, on_payment_created=on_payment_created)


def get_process_webhook_use_case(
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    repo: StatusPagamentoRepository = Depends(get_status_pagamento_repository),
) -> ProcessWebhookUseCase:
    async def on_payment_confirmed(
        transaction_id: str, external_id: Optional[str], paid_at: Optional[datetime]
    ) -> None:
        logger.info(f"[Pagamentos] Pagamento confirmado: {transaction_id} (pedido {external_id})")
        repo.salvar(
            transaction_id=transaction_id,
            status=PaymentStatus.PAID,
            external_id=external_id,
            paid_at=paid_at or datetime.now(timezone.utc),
        )

    async def on_payment_failed(transaction_id: str, external_id: Optional[str]) -> None:
        logger.info(f"[Pagamentos] Pagamento falhou: {transaction_id} (pedido {external_id})")
        repo.salvar(transaction_id=transaction_id, status=PaymentStatus.FAILED, external_id=external_id)

    return ProcessWebhookUseCase(
        gateway,
        on_payment_confirmed=on_payment_confirmed,
        on_payment_failed=on_payment_failed,
    )
