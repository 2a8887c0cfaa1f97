from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.api.pagamentos.contracts.payment_gateway_contract import PaymentStatus


class ClientePagamentoRequest(BaseModel):
    name: str = Field(..., min_length=1)
    document: str = Field(..., min_length=1, description="CPF ou CNPJ, com ou sem máscara")
    email: Optional[str] = None
    phone: Optional[str] = None


class CriarPagamentoRequest(BaseModel):
    order_id: str = Field(..., min_length=1, description="Referência externa (ID do pedido)")
    amount: float = Field(..., description="Valor em reais (ex.: 150.50)")
    customer: ClientePagamentoRequest
    description: Optional[str] = None


class PagamentoCriadoResponse(BaseModel):
    transaction_id: str
    status: PaymentStatus
    amount: float
    amount_cents: int
    gateway: str
    external_id: str
    qr_code: Optional[str] = None
    qr_code_base64: Optional[str] = None
    expires_at: Optional[datetime] = None


class CriarPagamentoResponse(BaseModel):
    success: bool = True
    payment: PagamentoCriadoResponse


class StatusPagamentoResponse(BaseModel):
    transaction_id: str
    status: PaymentStatus
    amount: Optional[float] = None
    paid_at: Optional[datetime] = None
    message: str


class WebhookResponse(BaseModel):
    success: bool = True
    status: Optional[PaymentStatus] = None
