from __future__ import annotations

import hashlib
import hmac
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.api.pagamentos.contracts.payment_gateway_contract import (
    CreatePaymentInput,
    IPaymentGateway,
    PaymentMethod,
    PaymentResult,
    PaymentStatus,
    PaymentStatusResult,
    PixData,
    WebhookPayload,
    WebhookValidation,
)
from app.api.pagamentos.exceptions import PaymentGatewayError
from app.utils.logger import logger
from app.utils.prometheus_metrics import record_gateway_call

GREENPAG_STATUS_MAP: Dict[str, PaymentStatus] = {
    "pending": PaymentStatus.PENDING,
    "waiting_payment": PaymentStatus.PENDING,
    "processing": PaymentStatus.PROCESSING,
    "paid": PaymentStatus.PAID,
    "approved": PaymentStatus.PAID,
    "failed": PaymentStatus.FAILED,
    "refused": PaymentStatus.FAILED,
    "cancelled": PaymentStatus.CANCELLED,
    "canceled": PaymentStatus.CANCELLED,
    "refunded": PaymentStatus.REFUNDED,
    "expired": PaymentStatus.EXPIRED,
}


def map_greenpag_status(status: Optional[str]) -> PaymentStatus:
    """Status desconhecido vira `pending`."""
    return GREENPAG_STATUS_MAP.get((status or "").lower(), PaymentStatus.PENDING)


class GreenPagTransaction(BaseModel):
    """Representa o bloco `data` das respostas da GreenPag."""

    transaction_id: str
    status: str = "pending"
    amount: int = 0
    qr_code: Optional[str] = None
    qr_code_image: Optional[str] = None
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class GreenPagWebhookBody(BaseModel):
    event: str = "payment.updated"
    transaction_id: str
    external_id: Optional[str] = None
    status: str
    amount: Optional[int] = None
    paid_at: Optional[datetime] = None


@dataclass(slots=True)
class GreenPagConfig:
    api_url: str
    public_key: str
    secret_key: str
    timeout: int = 20


class GreenPagAdapter(IPaymentGateway):
    """Adapter PIX para a API da GreenPag."""

    name = "greenpag"

    def __init__(
        self,
        config: GreenPagConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not config.public_key:
            raise ValueError("GreenPag: public_key é obrigatório")
        if not config.secret_key:
            raise ValueError("GreenPag: secret_key é obrigatório")
        if not config.api_url:
            raise ValueError("GreenPag: api_url é obrigatório")

        self.api_url = config.api_url.rstrip("/")
        self._secret_key = config.secret_key
        self._client = httpx.AsyncClient(
            base_url=self.api_url,
            headers={
                "X-Public-Key": config.public_key,
                "X-Secret-Key": config.secret_key,
                "Content-Type": "application/json",
            },
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def create_payment(self, data: CreatePaymentInput) -> PaymentResult:
        payload: Dict[str, Any] = {
            "amount": data.amount,
            "description": data.description,
            "customer": {
                "name": data.customer.name,
                "document": data.customer.document,
                "email": data.customer.email,
                "phone": data.customer.phone,
            },
            "external_id": data.external_id,
            "callback_url": data.callback_url,
        }
        if data.metadata:
            payload["metadata"] = data.metadata

        tx = await self._request("POST", "/payments", operation="create_payment", json=payload)
        return PaymentResult(
            success=True,
            transaction_id=tx.transaction_id,
            status=map_greenpag_status(tx.status),
            amount=tx.amount,
            expires_at=tx.expires_at,
            pix_data=PixData(
                qr_code=tx.qr_code or "",
                qr_code_base64=tx.qr_code_image or "",
                pix_key=tx.qr_code or "",
            ),
        )

    async def get_payment_status(self, transaction_id: str) -> PaymentStatusResult:
        tx = await self._request("GET", f"/payments/{transaction_id}", operation="get_payment_status")
        status = map_greenpag_status(tx.status)
        return PaymentStatusResult(
            transaction_id=tx.transaction_id,
            status=status,
            amount=tx.amount,
            paid_at=tx.paid_at,
        )

    async def cancel_payment(self, transaction_id: str) -> bool:
        tx = await self._request("POST", f"/payments/{transaction_id}/cancel", operation="cancel_payment")
        return map_greenpag_status(tx.status) == PaymentStatus.CANCELLED

    def validate_webhook(self, payload: str, signature: str) -> WebhookValidation:
        expected = self.sign_payload(payload)
        if not hmac.compare_digest(expected.encode("utf-8"), (signature or "").strip().encode("utf-8")):
            logger.warning("[GreenPag] Assinatura de webhook inválida")
            return WebhookValidation(is_valid=False, error="Assinatura do webhook inválida")

        try:
            body = GreenPagWebhookBody.model_validate(json.loads(payload))
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"[GreenPag] Corpo de webhook inválido: {e}")
            return WebhookValidation(is_valid=False, error=f"Falha ao interpretar webhook: {e}")

        return WebhookValidation(
            is_valid=True,
            payload=WebhookPayload(
                event=body.event,
                transaction_id=body.transaction_id,
                external_id=body.external_id,
                status=map_greenpag_status(body.status),
                amount=body.amount,
                paid_at=body.paid_at,
            ),
        )

    def supports_method(self, method: PaymentMethod) -> bool:
        return method == PaymentMethod.PIX

    def sign_payload(self, payload: str) -> str:
        """Assinatura HMAC-SHA256 (hex) que a GreenPag envia no header do webhook."""
        return hmac.new(self._secret_key.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()

    async def _request(self, method: str, path: str, *, operation: str, **kwargs) -> GreenPagTransaction:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            record_gateway_call(self.name, operation, "network_error")
            logger.error(f"[GreenPag] Erro de rede em {method} {path}: {e}")
            raise PaymentGatewayError(
                f"Falha de comunicação com a GreenPag: {e}", self.name, None, str(e)
            ) from e

        if resp.is_error:
            record_gateway_call(self.name, operation, "http_error")
            raw = self._safe_json(resp)
            logger.error(f"[GreenPag] {method} {path} retornou {resp.status_code}: {raw}")
            raise PaymentGatewayError(
                f"GreenPag API error: {resp.status_code} {resp.reason_phrase}",
                self.name,
                resp.status_code,
                raw,
            )

        result = self._safe_json(resp)
        if not isinstance(result, dict) or not result.get("success"):
            record_gateway_call(self.name, operation, "rejected")
            message = result.get("message") if isinstance(result, dict) else None
            raise PaymentGatewayError(
                message or "GreenPag request failed", self.name, resp.status_code, result
            )

        try:
            tx = GreenPagTransaction.model_validate(result.get("data") or {})
        except PydanticValidationError as e:
            record_gateway_call(self.name, operation, "invalid_response")
            raise PaymentGatewayError(
                "Resposta da GreenPag sem dados da transação", self.name, resp.status_code, result
            ) from e

        record_gateway_call(self.name, operation, "success")
        return tx

    @staticmethod
    def _safe_json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return resp.text
