import logging
import sys

_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None)))


class ContextFormatter(logging.Formatter):
    """Appends keyword context passed through Log.* as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and key not in ("message", "asctime")
        }
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
        return f"{message} {pairs}"


class Log:
    """Centralized logging with structured format."""

    _logger: logging.Logger = logging.getLogger("finintake")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the logger with the specified level and stdout handler."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                ContextFormatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log an info message."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log an error message."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        cls._logger.debug(message, extra=kwargs)
