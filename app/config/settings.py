import os
from decimal import Decimal
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() in ("1", "true", "yes")

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = os.getenv("ENABLE_DOCS", "true").lower() in ("1", "true", "yes")
SITE_URL = os.getenv("SITE_URL", "http://localhost:3000")

# Serviços externos de localização
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 10))
HTTP_USER_AGENT = os.getenv("HTTP_USER_AGENT", "EzPods-Delivery-App/1.0")
VIACEP_BASE_URL = os.getenv("VIACEP_BASE_URL", "https://viacep.com.br/ws")
NOMINATIM_BASE_URL = os.getenv("NOMINATIM_BASE_URL", "https://nominatim.openstreetmap.org")
OSRM_BASE_URL = os.getenv("OSRM_BASE_URL", "https://router.project-osrm.org")

# Estoque (origem das entregas): Avenida Fagundes de Oliveira 519, Piraporinha
WAREHOUSE_LATITUDE = float(os.getenv("WAREHOUSE_LATITUDE", -23.6947))
WAREHOUSE_LONGITUDE = float(os.getenv("WAREHOUSE_LONGITUDE", -46.5558))

# Política de frete
SHIPPING_PRICE_PER_KM = Decimal(os.getenv("SHIPPING_PRICE_PER_KM", "1.85"))
SHIPPING_MIN_COST = Decimal(os.getenv("SHIPPING_MIN_COST", "10.00"))
SHIPPING_FREE_THRESHOLD = Decimal(os.getenv("SHIPPING_FREE_THRESHOLD", "300.00"))
SHIPPING_AVERAGE_SPEED_KM_H = float(os.getenv("SHIPPING_AVERAGE_SPEED_KM_H", 30))
SHIPPING_ROUTE_INFLATION_FACTOR = float(os.getenv("SHIPPING_ROUTE_INFLATION_FACTOR", 1.3))
SHIPPING_MAX_DISTANCE_KM = float(os.getenv("SHIPPING_MAX_DISTANCE_KM", 50))

# Gateway de pagamento
DEFAULT_PAYMENT_GATEWAY = os.getenv("DEFAULT_PAYMENT_GATEWAY", "greenpag")

# GreenPag
GREENPAG_API_URL = os.getenv("GREENPAG_API_URL", "https://greenpag.com/api/v1")
GREENPAG_PUBLIC_KEY = os.getenv("GREENPAG_PUBLIC_KEY")
GREENPAG_SECRET_KEY = os.getenv("GREENPAG_SECRET_KEY")
GREENPAG_TIMEOUT_SECONDS = int(os.getenv("GREENPAG_TIMEOUT_SECONDS", 20))
