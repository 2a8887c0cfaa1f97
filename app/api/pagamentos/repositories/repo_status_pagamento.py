from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Dict, Optional

from app.api.pagamentos.contracts.payment_gateway_contract import PaymentStatus


@dataclass(frozen=True, slots=True)
class StatusPagamento:
    transaction_id: str
    status: PaymentStatus
    amount: int
    created_at: datetime
    updated_at: datetime
    external_id: Optional[str] = None
    paid_at: Optional[datetime] = None


class StatusPagamentoRepository:
    """
    Armazena em memória o último status conhecido de cada transação,
    entre o webhook do gateway e a consulta de status do cliente.

    Entradas mais antigas que ``max_age`` são descartadas na escrita.
    """

    def __init__(self, max_age: timedelta = timedelta(hours=24)):
        self._status: Dict[str, StatusPagamento] = {}
        self._lock = Lock()
        self.max_age = max_age

    def salvar(
        self,
        *,
        transaction_id: str,
        status: PaymentStatus,
        amount: Optional[int] = None,
        external_id: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> StatusPagamento:
        agora = datetime.now(timezone.utc)
        with self._lock:
            self._remover_expirados(agora)
            existente = self._status.get(transaction_id)
            if existente is None:
                registro = StatusPagamento(
                    transaction_id=transaction_id,
                    status=status,
                    amount=amount or 0,
                    created_at=agora,
                    updated_at=agora,
                    external_id=external_id,
                    paid_at=paid_at,
                )
            else:
                registro = replace(
                    existente,
                    status=status,
                    amount=amount if amount is not None else existente.amount,
                    external_id=external_id or existente.external_id,
                    paid_at=paid_at or existente.paid_at,
                    updated_at=agora,
                )
            self._status[transaction_id] = registro
            return registro

    def get(self, transaction_id: str) -> Optional[StatusPagamento]:
        with self._lock:
            return self._status.get(transaction_id)

    def clear(self) -> None:
        with self._lock:
            self._status.clear()

    def _remover_expirados(self, agora: datetime) -> None:
        limite = agora - self.max_age
        expirados = [tid for tid, reg in self._status.items() if reg.created_at < limite]
        for tid in expirados:
            del self._status[tid]
