import logging
import sys

from pricing_engine.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Настроить корневой логгер один раз (stdout, уровень из настроек)"""
    root_logger = logging.getLogger()
    root_logger.setLevel(level or settings.LOG_LEVEL)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Убираем старые хендлеры, чтобы не дублировать логи при перезагрузке
    root_logger.handlers = [handler]
