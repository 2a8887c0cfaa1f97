from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from app.core.exceptions import DomainError


class PaymentErrorCode(str, Enum):
    GATEWAY_UNAVAILABLE = "GATEWAY_UNAVAILABLE"
    GATEWAY_ERROR = "GATEWAY_ERROR"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_CUSTOMER = "INVALID_CUSTOMER"
    PAYMENT_DECLINED = "PAYMENT_DECLINED"
    PAYMENT_NOT_FOUND = "PAYMENT_NOT_FOUND"
    PAYMENT_ALREADY_PROCESSED = "PAYMENT_ALREADY_PROCESSED"
    WEBHOOK_INVALID = "WEBHOOK_INVALID"
    WEBHOOK_SIGNATURE_MISMATCH = "WEBHOOK_SIGNATURE_MISMATCH"
    REFUND_FAILED = "REFUND_FAILED"
    CANCEL_FAILED = "CANCEL_FAILED"


class PaymentError(DomainError):
    """Falha de pagamento no nível de domínio, independente do gateway."""

    def __init__(
        self,
        message: str,
        code: PaymentErrorCode,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code.value,
            "details": self.details,
        }


class PaymentGatewayError(Exception):
    """
    Erro de infraestrutura de um adapter de gateway.

    Toda falha do adapter (rede, HTTP != 2xx, recusa reportada pelo fornecedor)
    chega ao chamador com este único tipo.
    """

    def __init__(
        self,
        message: str,
        gateway_name: str,
        status_code: Optional[int] = None,
        raw_error: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.gateway_name = gateway_name
        self.status_code = status_code
        self.raw_error = raw_error
