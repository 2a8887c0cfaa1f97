from fastapi import APIRouter, Body, Depends, Path, Request, status

from app.api.pagamentos.contracts.payment_gateway_contract import (
    CustomerInput,
    IPaymentGateway,
    PaymentStatus,
)
from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode
from app.api.pagamentos.repositories.repo_status_pagamento import StatusPagamentoRepository
from app.api.pagamentos.schemas.schema_pagamento import (
    CriarPagamentoRequest,
    CriarPagamentoResponse,
    PagamentoCriadoResponse,
    StatusPagamentoResponse,
    WebhookResponse,
)
from app.api.pagamentos.services.create_payment_use_case import (
    CreatePaymentCommand,
    CreatePaymentUseCase,
)
from app.api.pagamentos.services.dependencies import (
    get_create_payment_use_case,
    get_payment_gateway,
    get_process_webhook_use_case,
    get_status_pagamento_repository,
)
from app.api.pagamentos.services.process_webhook_use_case import ProcessWebhookUseCase
from app.config import settings
from app.utils.logger import logger

router = APIRouter(prefix="/api/payments", tags=["Pagamentos"])

SIGNATURE_HEADERS = ("X-Signature", "X-Webhook-Signature")


def _mensagem_status(status_pagamento: PaymentStatus) -> str:
    if status_pagamento == PaymentStatus.PAID:
        return "Pagamento confirmado"
    if status_pagamento in (PaymentStatus.FAILED, PaymentStatus.CANCELLED):
        return "Pagamento não aprovado"
    if status_pagamento == PaymentStatus.EXPIRED:
        return "Pagamento expirado"
    return "Aguardando pagamento"


@router.post("/create", response_model=CriarPagamentoResponse, status_code=status.HTTP_201_CREATED)
async def criar_pagamento(
    payload: CriarPagamentoRequest = Body(...),
    use_case: CreatePaymentUseCase = Depends(get_create_payment_use_case),
):
    logger.info(f"[Pagamentos] Criar pagamento - pedido={payload.order_id} valor={payload.amount}")
    output = await use_case.execute(
        CreatePaymentCommand(
            order_id=payload.order_id,
            amount=payload.amount,
            customer=CustomerInput(
                name=payload.customer.name,
                document=payload.customer.document,
                email=payload.customer.email,
                phone=payload.customer.phone,
            ),
            description=payload.description,
            callback_url=f"{settings.SITE_URL.rstrip('/')}/api/payments/webhook",
        )
    )
    return CriarPagamentoResponse(
        payment=PagamentoCriadoResponse(
            transaction_id=output.transaction_id,
            status=output.status,
            amount=float(output.amount.value),
            amount_cents=output.amount.in_cents,
            gateway=output.gateway,
            external_id=payload.order_id,
            qr_code=output.pix_data.qr_code if output.pix_data else None,
            qr_code_base64=output.pix_data.qr_code_base64 if output.pix_data else None,
            expires_at=output.expires_at,
        )
    )


@router.get("/status/{transaction_id}", response_model=StatusPagamentoResponse)
async def consultar_status(
    transaction_id: str = Path(..., min_length=1, description="ID da transação no gateway"),
    repo: StatusPagamentoRepository = Depends(get_status_pagamento_repository),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
):
    """Retorna o último status recebido via webhook; sem registro local, consulta o gateway."""
    registro = repo.get(transaction_id)
    if registro is not None:
        return StatusPagamentoResponse(
            transaction_id=registro.transaction_id,
            status=registro.status,
            amount=registro.amount / 100,
            paid_at=registro.paid_at,
            message=_mensagem_status(registro.status),
        )

    logger.info(f"[Pagamentos] Status de {transaction_id} não está em memória, consultando {gateway.name}")
    resultado = await gateway.get_payment_status(transaction_id)
    repo.salvar(
        transaction_id=resultado.transaction_id,
        status=resultado.status,
        amount=resultado.amount,
        paid_at=resultado.paid_at,
    )
    return StatusPagamentoResponse(
        transaction_id=resultado.transaction_id,
        status=resultado.status,
        amount=resultado.amount / 100,
        paid_at=resultado.paid_at,
        message=_mensagem_status(resultado.status),
    )


@router.post("/webhook", response_model=WebhookResponse, status_code=status.HTTP_200_OK)
async def receber_webhook(
    request: Request,
    use_case: ProcessWebhookUseCase = Depends(get_process_webhook_use_case),
    repo: StatusPagamentoRepository = Depends(get_status_pagamento_repository),
):
    """
    Recebe notificações do gateway. O corpo é lido cru para a validação HMAC.

    Assinatura inválida retorna 401 sem nenhum efeito colateral.
    """
    try:
        payload = (await request.body()).decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"[Pagamentos] Webhook com corpo fora de UTF-8: {e}")
        raise PaymentError(
            "Corpo do webhook inválido",
            PaymentErrorCode.WEBHOOK_INVALID,
            {"gateway": use_case.payment_gateway.name},
        ) from e
    signature = next((request.headers[h] for h in SIGNATURE_HEADERS if h in request.headers), "")

    output = await use_case.execute(payload, signature)

    # pago/falhou/cancelado já foram gravados pelos hooks
    if output.new_status not in (PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.CANCELLED):
        repo.salvar(
            transaction_id=output.transaction_id,
            status=output.new_status,
            amount=output.amount,
            external_id=output.external_id,
        )

    return WebhookResponse(status=output.new_status)
