"""Logging configuration helpers."""

import logging

_CONTEXT_KEYS = ("user_id", "template_id", "day", "meal_slot")


class ContextFormatter(logging.Formatter):
    """Formatter that appends planner context passed through ``extra``."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in _CONTEXT_KEYS
            if getattr(record, key, None) is not None
        ]
        if context:
            return f"{message} [{' '.join(context)}]"
        return message


def configure_logging(level: str = "INFO") -> None:
    """Configure the meal_planner logger with a single stream handler."""
    logger = logging.getLogger("meal_planner")
    logger.setLevel(level.upper())
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
