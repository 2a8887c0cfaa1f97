from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Union

from app.api.pagamentos.contracts.payment_gateway_contract import (
    CreatePaymentInput,
    CustomerInput,
    IPaymentGateway,
    PaymentResult,
    PaymentStatus,
)
from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode
from app.api.pagamentos.models.documento import Documento
from app.api.pagamentos.models.money import Money
from app.core.exceptions import ValidationError
from app.utils.logger import logger

OnPaymentCreated = Callable[[PaymentResult, str], Awaitable[None]]


@dataclass(slots=True)
class CreatePaymentCommand:
    order_id: str
    amount: Union[Decimal, float, int, str]
    customer: CustomerInput
    description: Optional[str] = None
    callback_url: Optional[str] = None


@dataclass(slots=True)
class PixOutput:
    qr_code: str
    qr_code_base64: str


@dataclass(slots=True)
class CreatePaymentOutput:
    transaction_id: str
    amount: Money
    status: PaymentStatus
    gateway: str
    pix_data: Optional[PixOutput] = None
    expires_at: Optional[datetime] = None


class CreatePaymentUseCase:
    """
    Cria uma cobrança em qualquer gateway que implemente ``IPaymentGateway``.

    - Valida o documento do cliente (CPF/CNPJ)
    - Valida o valor (maior que zero)
    - Cria a cobrança no gateway
    - Chama o hook ``on_payment_created`` se informado
    """

    def __init__(
        self,
        payment_gateway: IPaymentGateway,
        on_payment_created: Optional[OnPaymentCreated] = None,
    ) -> None:
        self.payment_gateway = payment_gateway
        self.on_payment_created = on_payment_created

    async def execute(self, command: CreatePaymentCommand) -> CreatePaymentOutput:
        try:
            documento = Documento.create(command.customer.document)
        except ValidationError as e:
            raise PaymentError(
                "Documento do cliente inválido (CPF/CNPJ)",
                PaymentErrorCode.INVALID_CUSTOMER,
                {"document": command.customer.document},
            ) from e

        try:
            amount = Money.from_decimal(command.amount)
        except ValidationError as e:
            raise PaymentError(
                "Valor do pagamento inválido",
                PaymentErrorCode.INVALID_AMOUNT,
                {"amount": str(command.amount)},
            ) from e

        if amount.is_zero():
            raise PaymentError(
                "Valor do pagamento deve ser maior que zero",
                PaymentErrorCode.INVALID_AMOUNT,
                {"amount": str(command.amount)},
            )

        logger.info(
            f"[Pagamentos] Criando pagamento | pedido={command.order_id} "
            f"valor={amount.format()} gateway={self.payment_gateway.name}"
        )
        result = await self.payment_gateway.create_payment(
            CreatePaymentInput(
                amount=amount.in_cents,
                description=command.description or f"Pedido {command.order_id}",
                customer=CustomerInput(
                    name=command.customer.name,
                    document=documento.raw,
                    email=command.customer.email,
                    phone=command.customer.phone,
                ),
                external_id=command.order_id,
                callback_url=command.callback_url,
            )
        )

        if self.on_payment_created is not None:
            await self.on_payment_created(result, command.order_id)

        return CreatePaymentOutput(
            transaction_id=result.transaction_id,
            amount=amount,
            status=result.status,
            gateway=self.payment_gateway.name,
            pix_data=(
                PixOutput(qr_code=result.pix_data.qr_code, qr_code_base64=result.pix_data.qr_code_base64)
                if result.pix_data
                else None
            ),
            expires_at=result.expires_at,
        )
