import os
import sys
from threading import Lock
from typing import Any, TypeVar, cast

from dotenv import load_dotenv

from app.bootstrap.settings import Settings
from app.components.database.db_interface import DBInterface
from app.components.database.sqlite_db import SqliteDB
from app.components.logger.logger import Logger


# The google-genai SDK reads GOOGLE_API_KEY / GEMINI_API_KEY from the environment.
load_dotenv()


def _is_test_environment() -> bool:
    """True under pytest or when TESTING is set."""
    if any("pytest" in arg for arg in sys.argv):
        return True

    if os.getenv("TESTING", "").lower() in ("true", "1", "yes"):
        return True

    return False


def _validate_otel_env_vars() -> None:
    """
    Require either complete Langfuse credentials or an OTLP endpoint plus headers.

    Raises:
        RuntimeError: If neither is configured.
    """
    otel_endpoint: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "").strip()
    otel_headers: str = os.getenv("OTEL_EXPORTER_OTLP_HEADERS", "").strip()

    langfuse_public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "").strip()
    langfuse_secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "").strip()
    langfuse_base_url: str = os.getenv("LANGFUSE_BASE_URL", "").strip()

    if langfuse_public_key and langfuse_secret_key and langfuse_base_url:
        return

    if not otel_endpoint:
        raise RuntimeError("OTEL_EXPORTER_OTLP_ENDPOINT is not set or is empty.")

    if not otel_headers:
        raise RuntimeError(
            "OTEL_EXPORTER_OTLP_HEADERS is not set or is empty, and the Langfuse "
            "credentials are incomplete."
        )


_tracing_configured = False


def configure_tracing(settings: Settings) -> bool:
    """
    Instrument the google-genai SDK for OpenTelemetry export when enabled.

    Returns:
        True if instrumentation is active after the call.
    """
    global _tracing_configured
    if _tracing_configured:
        return True
    if not settings.tracing_enabled or _is_test_environment():
        return False

    _validate_otel_env_vars()

    from openinference.instrumentation.google_genai import GoogleGenAIInstrumentor

    GoogleGenAIInstrumentor().instrument()
    _tracing_configured = True
    return True


T = TypeVar("T")


class ComponentsMeta(type):
    _instances: dict[tuple[type, str], "Components"] = {}
    _lock: Lock = Lock()

    def __call__(cls, *args, **kwargs):
        env = args[0] if args else kwargs.get("env")
        if env is None:
            raise ValueError("Environment must be provided")

        env_key = str(env)
        key = (cls, env_key)
        with cls._lock:
            if key not in cls._instances:
                instance = super().__call__(*args, **kwargs)
                cls._instances[key] = instance
        return cls._instances[key]


class Components(metaclass=ComponentsMeta):
    def __init__(self, env: str, env_file: str | None = ".env") -> None:
        self.__env: str = env
        self.__env_file: str | None = env_file
        self.__components: dict[type[Any], Any] = self.__bootstrap_components()

    def __bootstrap_components(self) -> dict[type[Any], Any]:
        if self.__env in {"development", "staging", "production"}:
            return self.__get_components()

        raise ValueError(f"Invalid environment: {self.__env}")

    def __get_components(self) -> dict[type[Any], Any]:
        settings = Settings(_env_file=self.__env_file)

        logger = Logger(log_format=settings.log_format, log_level=settings.log_level)
        _logger_instance = logger.get_logger("Components")

        tracing = configure_tracing(settings)

        history_db: DBInterface = SqliteDB(db_path=settings.history_db_path)
        history_db.connect()

        _logger_instance.info(
            "Components ready (env=%s, model=%s, tracing=%s)",
            self.__env,
            settings.image_model_name,
            tracing,
        )

        return {
            Settings: settings,
            Logger: logger,
            DBInterface: history_db,
        }

    def get_component(self, component_name: type[T]) -> T:
        if component_name not in self.__components:
            raise ValueError(f"Component {component_name} not found")

        return cast(T, self.__components[component_name])

    def get_env(self) -> str:
        return self.__env
