from fastapi import FastAPI, HTTPException, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST

from app.api.pagamentos.exceptions import PaymentError, PaymentGatewayError
from app.core.exceptions import (
    ExternalServiceError,
    GeocodingError,
    NotFoundError,
    RoutingError,
    ValidationError,
)
from app.core.exception_handlers import (
    domain_validation_handler,
    general_exception_handler,
    geocoding_error_handler,
    http_exception_handler,
    not_found_handler,
    payment_error_handler,
    payment_gateway_error_handler,
    upstream_error_handler,
    validation_exception_handler,
)
from app.utils.logger import logger
from app.utils.prometheus_metrics import PrometheusMiddleware, get_metrics
from app.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL, ENABLE_DOCS

from app.api.frete.router.router_frete import router as frete_router
from app.api.localizacao.router.router_localizacao import router as localizacao_router
from app.api.pagamentos.router.router_pagamentos import router as pagamentos_router
from app.api.pagamentos.services.dependencies import _get_payment_gateway_instance

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="API de Frete e Pagamentos",
    version="1.0.0",
    description="Cálculo de frete por CEP e cobranças PIX",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}] if BASE_URL else None,
    redirect_slashes=False  # Evita redirecionamento 307 quando URL não termina com /
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(ValidationError, domain_validation_handler)
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(GeocodingError, geocoding_error_handler)
app.add_exception_handler(RoutingError, upstream_error_handler)
app.add_exception_handler(ExternalServiceError, upstream_error_handler)
app.add_exception_handler(PaymentError, payment_error_handler)
app.add_exception_handler(PaymentGatewayError, payment_gateway_error_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares
# ───────────────────────────
# Middlewares são executados na ORDEM REVERSA da adição (último adicionado = primeiro executado)
app.add_middleware(PrometheusMiddleware)

# Regra:
# - Se CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - Caso contrário => allow_origins=CORS_ORIGINS (se vazio cai para ["*"]), allow_credentials=True somente quando houver origens explícitas
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Shutdown
# ───────────────────────────
@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando API...")
    # Só fecha o cliente HTTP se o gateway chegou a ser criado
    if _get_payment_gateway_instance.cache_info().currsize:
        await _get_payment_gateway_instance().close()
    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return Response(content=get_metrics(), media_type=CONTENT_TYPE_LATEST)


app.include_router(localizacao_router)
app.include_router(frete_router)
app.include_router(pagamentos_router)
