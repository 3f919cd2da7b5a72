import logging
from typing import Optional, Union

from .config import settings

LOGGER_NAME = "buildcrew"


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach a console handler to the package logger; LOG_LEVEL is used when no level is given."""
    level = level or settings.LOG_LEVEL
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - [%(agent_id)s] - %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler.addFilter(_DefaultAgentFilter())
    logger.addHandler(handler)

    return logger


class _DefaultAgentFilter(logging.Filter):
    """Fill in agent_id for records that did not come through AgentAdapter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "agent_id"):
            record.agent_id = "system"
        return True


class AgentAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        agent_id = self.extra.get("agent_id", "system")
        kwargs["extra"] = {**kwargs.get("extra", {}), "agent_id": agent_id}
        return msg, kwargs
