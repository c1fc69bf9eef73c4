import logging
from datetime import datetime


class AppFormatter(logging.Formatter):
    """Formats records as: HH:MM:SS - name - LEVEL: message"""

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        formatted_msg = f"{timestamp} - {record.name} - {record.levelname}: {record.getMessage()}"

        if record.exc_info:
            formatted_msg += "\n" + self.formatException(record.exc_info)

        return formatted_msg


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the application logger.

    All modules log through logging.getLogger(__name__) under the "app"
    namespace, so configuring the "app" logger once covers them.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)

    Returns:
        The configured "app" logger
    """
    logger = logging.getLogger("app")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Prevent duplicate handlers on reload
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(AppFormatter())
    logger.addHandler(handler)
    return logger
