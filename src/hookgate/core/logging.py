import json
import logging
import sys

# Default Logger Name
LOGGER_NAME = "hookgate"

TEXT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"


class DeliveryFormatter(logging.Formatter):
    """
    Formatter aware of the webhook delivery id.

    Records logged with `extra={"delivery": ...}` get the id appended in text
    mode, or as a `delivery` field in JSON mode.
    """

    def __init__(self, json_format: bool = False) -> None:
        super().__init__(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        delivery = getattr(record, "delivery", None)
        if not self.json_format:
            line = super().format(record)
            return f"{line} (delivery={delivery})" if delivery else line

        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if delivery:
            entry["delivery"] = delivery
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(level: int | str = logging.INFO, json_format: bool = False) -> logging.Logger:
    """
    Configure the HookGate logger.

    Args:
        level: Logging level (e.g., logging.INFO, "DEBUG")
        json_format: Emit one JSON object per line (for log shippers)

    Returns:
        The configured logger instance.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    # Re-configuring replaces the handler
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(DeliveryFormatter(json_format))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a child logger of hookgate."""
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)
