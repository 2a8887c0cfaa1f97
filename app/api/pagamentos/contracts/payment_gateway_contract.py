"""
Contrato (porta de saída) que todo adapter de gateway de pagamento implementa.

Para adicionar um gateway:
1. Criar o adapter em ``app/api/pagamentos/adapters/``
2. Implementar ``IPaymentGateway``
3. Registrar a factory em ``build_payment_gateway_registry``
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    EXPIRED = "expired"


class PaymentMethod(str, Enum):
    PIX = "pix"
    CREDIT_CARD = "credit_card"
    BOLETO = "boleto"
    DEBIT_CARD = "debit_card"


@dataclass(slots=True)
class CustomerInput:
    name: str
    document: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(slots=True)
class CreatePaymentInput:
    """Dados para criar uma cobrança. ``amount`` em centavos."""

    amount: int
    description: str
    customer: CustomerInput
    external_id: str
    callback_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PixData:
    qr_code: str
    qr_code_base64: str
    pix_key: str


@dataclass(slots=True)
class CardData:
    authorization_code: str
    last_four_digits: str
    brand: str


@dataclass(slots=True)
class BoletoData:
    barcode: str
    digitable_line: str
    pdf_url: str


@dataclass(slots=True)
class PaymentResult:
    success: bool
    transaction_id: str
    status: PaymentStatus
    amount: int
    expires_at: Optional[datetime] = None
    pix_data: Optional[PixData] = None
    card_data: Optional[CardData] = None
    boleto_data: Optional[BoletoData] = None


@dataclass(slots=True)
class PaymentStatusResult:
    transaction_id: str
    status: PaymentStatus
    amount: int
    paid_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None


@dataclass(slots=True)
class WebhookPayload:
    event: str
    transaction_id: str
    status: PaymentStatus
    amount: Optional[int] = None
    external_id: Optional[str] = None
    paid_at: Optional[datetime] = None


@dataclass(slots=True)
class WebhookValidation:
    is_valid: bool
    payload: Optional[WebhookPayload] = None
    error: Optional[str] = None


@dataclass(slots=True)
class RefundResult:
    success: bool
    amount: int
    status: str  # pending | completed | failed
    refund_id: Optional[str] = None


class IPaymentGateway(ABC):
    """Interface para gateways de pagamento (GreenPag, Mercado Pago, etc)."""

    name: str

    @abstractmethod
    async def create_payment(self, data: CreatePaymentInput) -> PaymentResult:
        """
        Cria uma nova cobrança.

        Raises:
            PaymentGatewayError: falha de rede, HTTP != 2xx ou recusa do gateway
        """
        pass

    @abstractmethod
    async def get_payment_status(self, transaction_id: str) -> PaymentStatusResult:
        """Consulta o status atual de uma cobrança."""
        pass

    @abstractmethod
    def validate_webhook(self, payload: str, signature: str) -> WebhookValidation:
        """
        Valida a assinatura do webhook e, somente se válida, interpreta o corpo.

        Args:
            payload: corpo bruto da requisição
            signature: valor do header de assinatura
        """
        pass

    async def cancel_payment(self, transaction_id: str) -> bool:
        raise PaymentError(
            f"Gateway '{self.name}' não suporta cancelamento",
            PaymentErrorCode.CANCEL_FAILED,
            {"transaction_id": transaction_id},
        )

    async def refund_payment(self, transaction_id: str, amount: Optional[int] = None) -> RefundResult:
        raise PaymentError(
            f"Gateway '{self.name}' não suporta estorno",
            PaymentErrorCode.REFUND_FAILED,
            {"transaction_id": transaction_id},
        )

    def supports_method(self, method: PaymentMethod) -> bool:
        return False

    async def close(self) -> None:
        """Libera recursos de rede do adapter."""
        return None
