# app/utils/logger.py

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import os

from app.utils.prometheus_metrics import record_log

# Caminho da pasta logs/ (pode ser sobrescrito por LOG_DIR)
BASE_DIR = Path(__file__).resolve().parent.parent
LOG_DIR = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


class PrometheusLogHandler(logging.Handler):
    """Conta as mensagens de log por nível nas métricas Prometheus."""

    def emit(self, record):
        try:
            record_log(record.levelname)
        except Exception:
            self.handleError(record)


# Instância do logger
logger = logging.getLogger("ezpods_logger")
logger.setLevel(LOG_LEVEL)

# Evita duplicar handlers se importar várias vezes
if not logger.handlers:
    formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")

    file_handler = RotatingFileHandler(
        filename=LOG_DIR / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.addHandler(PrometheusLogHandler())
