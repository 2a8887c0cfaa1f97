import json

import httpx
import pytest

from app.api.pagamentos.adapters.greenpag_adapter import (
    GreenPagAdapter,
    GreenPagConfig,
    map_greenpag_status,
)
from app.api.pagamentos.adapters.registry import PaymentGatewayRegistry, build_payment_gateway_registry
from app.api.pagamentos.contracts.payment_gateway_contract import (
    CreatePaymentInput,
    CustomerInput,
    PaymentMethod,
    PaymentStatus,
)
from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode, PaymentGatewayError
from app.config import settings

CONFIG = GreenPagConfig(
    api_url="https://greenpag.test/api/v1",
    public_key="pk_test",
    secret_key="sk_test",
)

TX_CRIADA = {
    "transaction_id": "gp_123",
    "status": "waiting_payment",
    "amount": 1050,
    "qr_code": "00020126580014br.gov.bcb.pix",
    "qr_code_image": "iVBORw0KGgo=",
    "expires_at": "2026-10-18T12:30:00Z",
}


def _adapter(handler) -> GreenPagAdapter:
    return GreenPagAdapter(CONFIG, transport=httpx.MockTransport(handler))


def _input() -> CreatePaymentInput:
    return CreatePaymentInput(
        amount=1050,
        description="Pedido 42",
        customer=CustomerInput(name="Maria", document="52998224725", email="maria@example.com"),
        external_id="42",
        callback_url="https://loja.test/api/payments/webhook",
    )


@pytest.mark.asyncio
async def test_create_payment_sucesso():
    recebido = {}

    def handler(request: httpx.Request) -> httpx.Response:
        recebido["path"] = request.url.path
        recebido["headers"] = request.headers
        recebido["body"] = json.loads(request.content)
        return httpx.Response(201, json={"success": True, "data": TX_CRIADA})

    result = await _adapter(handler).create_payment(_input())

    assert recebido["path"] == "/api/v1/payments"
    assert recebido["headers"]["X-Public-Key"] == "pk_test"
    assert recebido["headers"]["X-Secret-Key"] == "sk_test"
    assert recebido["body"]["amount"] == 1050
    assert recebido["body"]["external_id"] == "42"
    assert result.success is True
    assert result.transaction_id == "gp_123"
    assert result.status == PaymentStatus.PENDING
    assert result.pix_data.qr_code == TX_CRIADA["qr_code"]
    assert result.pix_data.qr_code_base64 == TX_CRIADA["qr_code_image"]
    assert result.expires_at is not None


@pytest.mark.asyncio
async def test_create_payment_http_error():
    adapter = _adapter(lambda request: httpx.Response(500, json={"message": "Internal error"}))
    with pytest.raises(PaymentGatewayError) as exc:
        await adapter.create_payment(_input())
    assert exc.value.gateway_name == "greenpag"
    assert exc.value.status_code == 500
    assert exc.value.raw_error == {"message": "Internal error"}


@pytest.mark.asyncio
async def test_create_payment_success_false():
    adapter = _adapter(lambda request: httpx.Response(200, json={"success": False, "message": "Cliente bloqueado"}))
    with pytest.raises(PaymentGatewayError) as exc:
        await adapter.create_payment(_input())
    assert exc.value.message == "Cliente bloqueado"


@pytest.mark.asyncio
async def test_create_payment_falha_de_rede():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(PaymentGatewayError) as exc:
        await _adapter(handler).create_payment(_input())
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_get_payment_status_desconhecido_vira_pending():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/payments/gp_123"
        return httpx.Response(200, json={"success": True, "data": {"transaction_id": "gp_123", "status": "em_analise", "amount": 1050}})

    result = await _adapter(handler).get_payment_status("gp_123")
    assert result.status == PaymentStatus.PENDING
    assert result.amount == 1050


@pytest.mark.asyncio
async def test_cancel_payment():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/v1/payments/gp_123/cancel"
        return httpx.Response(200, json={"success": True, "data": {"transaction_id": "gp_123", "status": "canceled"}})

    assert await _adapter(handler).cancel_payment("gp_123") is True


@pytest.mark.parametrize(
    "status,esperado",
    [
        ("paid", PaymentStatus.PAID),
        ("APPROVED", PaymentStatus.PAID),
        ("refused", PaymentStatus.FAILED),
        ("expired", PaymentStatus.EXPIRED),
        ("refunded", PaymentStatus.REFUNDED),
        ("qualquer_coisa", PaymentStatus.PENDING),
        (None, PaymentStatus.PENDING),
    ],
)
def test_mapeamento_de_status(status, esperado):
    assert map_greenpag_status(status) == esperado


def test_validate_webhook_assinatura_valida():
    adapter = _adapter(lambda request: httpx.Response(200))
    payload = json.dumps({"event": "payment.paid", "transaction_id": "gp_123", "external_id": "42", "status": "paid", "amount": 1050})

    validation = adapter.validate_webhook(payload, adapter.sign_payload(payload))

    assert validation.is_valid is True
    assert validation.payload.transaction_id == "gp_123"
    assert validation.payload.status == PaymentStatus.PAID
    assert validation.payload.external_id == "42"


def test_validate_webhook_payload_adulterado():
    adapter = _adapter(lambda request: httpx.Response(200))
    payload = json.dumps({"transaction_id": "gp_123", "status": "pending", "amount": 1050})
    assinatura = adapter.sign_payload(payload)
    adulterado = payload.replace("pending", "paid")

    validation = adapter.validate_webhook(adulterado, assinatura)

    assert validation.is_valid is False
    assert validation.payload is None
    assert validation.error


def test_validate_webhook_corpo_invalido():
    adapter = _adapter(lambda request: httpx.Response(200))
    payload = "não é json"
    validation = adapter.validate_webhook(payload, adapter.sign_payload(payload))
    assert validation.is_valid is False


def test_supports_method_apenas_pix():
    adapter = _adapter(lambda request: httpx.Response(200))
    assert adapter.supports_method(PaymentMethod.PIX)
    assert not adapter.supports_method(PaymentMethod.CREDIT_CARD)
    assert not adapter.supports_method(PaymentMethod.BOLETO)


@pytest.mark.asyncio
async def test_refund_nao_suportado():
    adapter = _adapter(lambda request: httpx.Response(200))
    with pytest.raises(PaymentError) as exc:
        await adapter.refund_payment("gp_123")
    assert exc.value.code == PaymentErrorCode.REFUND_FAILED


def test_config_sem_chaves():
    with pytest.raises(ValueError):
        GreenPagAdapter(GreenPagConfig(api_url="https://greenpag.test", public_key="", secret_key="sk"))
    with pytest.raises(ValueError):
        GreenPagAdapter(GreenPagConfig(api_url="https://greenpag.test", public_key="pk", secret_key=""))


# ---------------- Registry ----------------
def test_registry_gateway_desconhecido():
    registry = build_payment_gateway_registry()
    assert registry.available() == ["greenpag"]
    with pytest.raises(PaymentError) as exc:
        registry.create("stripe")
    assert exc.value.code == PaymentErrorCode.GATEWAY_UNAVAILABLE


def test_registry_greenpag_sem_chaves(monkeypatch):
    monkeypatch.setattr(settings, "GREENPAG_PUBLIC_KEY", None)
    monkeypatch.setattr(settings, "GREENPAG_SECRET_KEY", None)
    with pytest.raises(PaymentError) as exc:
        build_payment_gateway_registry().create("greenpag")
    assert exc.value.code == PaymentErrorCode.GATEWAY_UNAVAILABLE


def test_registry_greenpag_configurado(monkeypatch):
    monkeypatch.setattr(settings, "GREENPAG_PUBLIC_KEY", "pk")
    monkeypatch.setattr(settings, "GREENPAG_SECRET_KEY", "sk")
    gateway = build_payment_gateway_registry().create("GreenPag")
    assert isinstance(gateway, GreenPagAdapter)


def test_registry_aceita_novos_gateways():
    registry = PaymentGatewayRegistry()
    registry.register("fake", lambda: _adapter(lambda request: httpx.Response(200)))
    assert registry.available() == ["fake"]
    assert registry.create("FAKE").name == "greenpag"
