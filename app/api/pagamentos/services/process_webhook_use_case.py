from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional

from app.api.pagamentos.contracts.payment_gateway_contract import IPaymentGateway, PaymentStatus
from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode
from app.utils.logger import logger

PaymentHook = Callable[[str, Optional[str]], Awaitable[None]]
PaymentConfirmedHook = Callable[[str, Optional[str], Optional[datetime]], Awaitable[None]]


@dataclass(slots=True)
class ProcessWebhookOutput:
    processed: bool
    transaction_id: str
    new_status: PaymentStatus
    is_paid: bool
    external_id: Optional[str] = None
    amount: Optional[int] = None


class ProcessWebhookUseCase:
    """
    Valida e processa webhooks de pagamento de qualquer gateway.

    Sem dependência de banco: efeitos colaterais ficam nos hooks
    ``on_payment_confirmed`` (status pago, recebe o ``paid_at`` do gateway)
    e ``on_payment_failed`` (falhou/cancelado), ambos opcionais.
    """

    def __init__(
        self,
        payment_gateway: IPaymentGateway,
        on_payment_confirmed: Optional[PaymentConfirmedHook] = None,
        on_payment_failed: Optional[PaymentHook] = None,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.on_payment_confirmed = on_payment_confirmed
        self.on_payment_failed = on_payment_failed

    async def execute(self, payload: str, signature: str) -> ProcessWebhookOutput:
        validation = self.payment_gateway.validate_webhook(payload, signature)
        if not validation.is_valid or validation.payload is None:
            raise PaymentError(
                validation.error or "Assinatura do webhook inválida",
                PaymentErrorCode.WEBHOOK_INVALID,
                {"gateway": self.payment_gateway.name},
            )

        data = validation.payload
        logger.info(
            f"[Pagamentos] Webhook recebido | evento={data.event} "
            f"transacao={data.transaction_id} status={data.status.value}"
        )

        if data.status == PaymentStatus.PAID and self.on_payment_confirmed is not None:
            await self.on_payment_confirmed(data.transaction_id, data.external_id, data.paid_at)

        if data.status in (PaymentStatus.FAILED, PaymentStatus.CANCELLED) and self.on_payment_failed is not None:
            await self.on_payment_failed(data.transaction_id, data.external_id)

        return ProcessWebhookOutput(
            processed=True,
            transaction_id=data.transaction_id,
            new_status=data.status,
            is_paid=data.status == PaymentStatus.PAID,
            external_id=data.external_id,
            amount=data.amount,
        )
