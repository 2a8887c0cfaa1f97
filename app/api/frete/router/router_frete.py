from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from app.api.frete.schemas.schema_frete import (
    CalcularFreteRequest,
    CalcularFreteResponse,
    ForaDaAreaResponse,
)
from app.api.frete.services.dependencies import get_frete_service
from app.api.frete.services.service_frete import FreteService
from app.utils.logger import logger

router = APIRouter(prefix="/api/shipping", tags=["Frete"])


@router.post(
    "/calculate",
    response_model=CalcularFreteResponse,
    responses={400: {"model": ForaDaAreaResponse}},
    status_code=status.HTTP_200_OK,
)
async def calcular_frete(
    payload: CalcularFreteRequest = Body(...),
    svc: FreteService = Depends(get_frete_service),
):
    """
    Calcula o frete do estoque até o CEP informado.

    CEP fora da área de entrega retorna 400 com a distância calculada.
    """
    logger.info(f"[Frete] Calculando frete para cep={payload.cep} cart_total={payload.cart_total}")
    quote = await svc.calculate_shipping(cep=payload.cep, cart_total=payload.cart_total)

    if not svc.is_within_delivery_area(quote.distance_km):
        logger.info(f"[Frete] CEP {payload.cep} fora da área de entrega ({quote.distance_km} km)")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ForaDaAreaResponse(
                error="CEP fora da área de entrega",
                max_distance_km=svc.policy.max_distance_km,
                distance_km=quote.distance_km,
            ).model_dump(),
        )

    return CalcularFreteResponse(**quote.model_dump())
