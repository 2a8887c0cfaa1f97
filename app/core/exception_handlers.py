"""
Exception handlers globais para capturar e logar erros da API.
"""
import json
import traceback

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.pagamentos.exceptions import PaymentError, PaymentErrorCode, PaymentGatewayError
from app.core.exceptions import (
    ExternalServiceError,
    GeocodingError,
    NotFoundError,
    RoutingError,
    ValidationError,
)
from app.utils.logger import logger

PAYMENT_ERROR_STATUS = {
    PaymentErrorCode.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    PaymentErrorCode.INVALID_CUSTOMER: status.HTTP_400_BAD_REQUEST,
    PaymentErrorCode.WEBHOOK_INVALID: status.HTTP_401_UNAUTHORIZED,
    PaymentErrorCode.WEBHOOK_SIGNATURE_MISMATCH: status.HTTP_401_UNAUTHORIZED,
    PaymentErrorCode.PAYMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    PaymentErrorCode.GATEWAY_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    PaymentErrorCode.GATEWAY_ERROR: status.HTTP_502_BAD_GATEWAY,
}


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler para erros de validação (422) do FastAPI/Pydantic.
    Registra os erros detalhados nos logs.
    """
    error_details = []
    for error in exc.errors():
        error_details.append({
            "field": ".".join(str(loc) for loc in error.get("loc", [])),
            "type": error.get("type", "unknown"),
            "message": error.get("msg", "Erro de validação"),
        })

    logger.error(
        f"[VALIDATION ERROR 422] {request.method} {request.url.path} - "
        f"Erros de validação detectados:\n{json.dumps(error_details, indent=2, ensure_ascii=False)}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": error_details,
            "message": "Erro de validação nos dados fornecidos",
        }
    )


async def http_exception_handler(request: Request, exc):
    """
    Handler para HTTPExceptions.
    Registra erros HTTP nos logs com detalhes.
    """
    status_code = exc.status_code
    if status_code >= 400:
        logger.error(
            f"[HTTP ERROR {status_code}] {request.method} {request.url.path} - "
            f"Detalhes: {exc.detail}"
        )

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": str(exc.detail),
            "status_code": status_code
        }
    )


async def domain_validation_handler(request: Request, exc: ValidationError):
    logger.warning(f"[VALIDATION ERROR 400] {request.method} {request.url.path} - {exc.message} (campo={exc.field})")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message, "field": exc.field}
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info(f"[NOT FOUND 404] {request.method} {request.url.path} - {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": exc.message}
    )


async def geocoding_error_handler(request: Request, exc: GeocodingError):
    logger.warning(f"[GEOCODING ERROR 422] {request.method} {request.url.path} - {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": exc.message}
    )


async def upstream_error_handler(request: Request, exc: Exception):
    """Falhas de serviços externos (rotas, ViaCEP, Nominatim) viram 502."""
    logger.error(f"[UPSTREAM ERROR 502] {request.method} {request.url.path} - {type(exc).__name__}: {exc}")
    mensagem = exc.message if isinstance(exc, (RoutingError, ExternalServiceError)) else str(exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": mensagem}
    )


async def payment_error_handler(request: Request, exc: PaymentError):
    status_code = PAYMENT_ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    logger.warning(f"[PAYMENT ERROR {status_code}] {request.method} {request.url.path} - {exc.code.value}: {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "code": exc.code.value}
    )


async def payment_gateway_error_handler(request: Request, exc: PaymentGatewayError):
    """O corpo bruto do gateway fica só no log."""
    logger.error(
        f"[GATEWAY ERROR 502] {request.method} {request.url.path} - gateway={exc.gateway_name} "
        f"status={exc.status_code} mensagem={exc.message} raw={exc.raw_error}"
    )
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"error": "Erro ao comunicar com o gateway de pagamento", "gateway": exc.gateway_name}
    )


async def general_exception_handler(request: Request, exc: Exception):
    """
    Handler para exceções não tratadas.
    Registra erros críticos nos logs.
    """
    logger.error(
        f"[UNHANDLED EXCEPTION] {request.method} {request.url.path} - "
        f"{type(exc).__name__}: {str(exc)}"
    )
    logger.error(f"[UNHANDLED EXCEPTION] Traceback completo:\n{traceback.format_exc()}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Erro interno do servidor",
            "error_type": type(exc).__name__,
        }
    )

