"""
Métricas Prometheus da API de frete e pagamentos.
"""
import re
from time import time
from typing import Callable

from prometheus_client import Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Métricas de requisições HTTP
http_requests_total = Counter(
    'http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Métricas de domínio
shipping_quotes_total = Counter(
    'shipping_quotes_total',
    'Total de cotações de frete calculadas',
    ['free_shipping']
)

shipping_route_fallback_total = Counter(
    'shipping_route_fallback_total',
    'Cotações que usaram distância em linha reta por falha no roteamento'
)

payment_gateway_requests_total = Counter(
    'payment_gateway_requests_total',
    'Chamadas feitas aos gateways de pagamento',
    ['gateway', 'operation', 'outcome']
)

# Métricas de logs
log_messages_total = Counter(
    'log_messages_total',
    'Total de mensagens de log',
    ['level']
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware para coletar métricas Prometheus das requisições HTTP."""

    async def dispatch(self, request: Request, call_next: Callable):
        # Ignora o endpoint de métricas para evitar loop
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        endpoint = self._normalize_endpoint(request.url.path)
        start_time = time()

        try:
            response = await call_next(request)
        except Exception:
            http_requests_total.labels(method=method, endpoint=endpoint, status_code=500).inc()
            raise

        http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=response.status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint
        ).observe(time() - start_time)
        return response

    def _normalize_endpoint(self, endpoint: str) -> str:
        """
        Normaliza endpoints removendo CEPs e IDs para evitar alta cardinalidade.
        Ex: /api/localizacao/cep/01310100 -> /api/localizacao/cep/{cep}
        """
        endpoint = re.sub(r'/cep/[^/]+', '/cep/{cep}', endpoint)
        endpoint = re.sub(r'/status/[^/]+', '/status/{transaction_id}', endpoint)
        return re.sub(r'/\d+', '/{id}', endpoint)


def get_metrics():
    """Retorna as métricas no formato Prometheus."""
    return generate_latest()


def record_log(level: str):
    """Registra uma mensagem de log nas métricas."""
    log_messages_total.labels(level=level).inc()


def record_gateway_call(gateway: str, operation: str, outcome: str):
    payment_gateway_requests_total.labels(gateway=gateway, operation=operation, outcome=outcome).inc()
