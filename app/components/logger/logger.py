import logging
import sys

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Logger:
    """
    Configures the root logger once and hands out named loggers.

    Services receive the result of get_logger() by constructor injection.
    """

    _HANDLER_NAME = "bottle_studio"

    def __init__(self, log_format: str | None = None, log_level: str = "INFO"):
        self.log_format = log_format or DEFAULT_LOG_FORMAT
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self._configure()

    def _configure(self) -> None:
        root = logging.getLogger()
        root.setLevel(self.log_level)

        # Reconfiguring must not stack handlers.
        for handler in root.handlers:
            if handler.get_name() == self._HANDLER_NAME:
                handler.setFormatter(logging.Formatter(self.log_format))
                return

        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(self._HANDLER_NAME)
        handler.setFormatter(logging.Formatter(self.log_format))
        root.addHandler(handler)

        # google-genai and httpx are chatty at INFO.
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("google_genai").setLevel(logging.WARNING)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)
