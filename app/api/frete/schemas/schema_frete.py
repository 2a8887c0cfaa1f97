from pydantic import BaseModel, Field


class CalcularFreteRequest(BaseModel):
    cep: str = Field(..., min_length=1, description="CEP de entrega")
    cart_total: float = Field(..., ge=0, description="Valor total do carrinho")


class ShippingQuote(BaseModel):
    distance_km: float
    shipping_cost: float
    estimated_time_minutes: int
    free_shipping: bool
    free_shipping_remaining: float
    delivery_address: str


class CalcularFreteResponse(ShippingQuote):
    success: bool = True


class ForaDaAreaResponse(BaseModel):
    error: str
    max_distance_km: float
    distance_km: float
