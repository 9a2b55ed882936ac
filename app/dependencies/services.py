from google import genai

from app.bootstrap.components import Components
from app.bootstrap.settings import Settings
from app.components.logger.logger import Logger
from app.dependencies.repositories import get_history_repository
from app.services.GenerationService.gemini_image_client import GeminiImageClient
from app.services.GenerationService.generation_client_interface import (
    GenerationClientInterface,
)
from app.services.GenerationService.generation_service import GenerationService
from app.services.GenerationService.generation_service_interface import (
    GenerationServiceInterface,
)
from app.utils.retry import RetryPolicy


def get_genai_client(settings: Settings) -> genai.Client:
    """
    Create the Google Gen AI client.

    Uses Vertex AI when USE_VERTEX_AI is set, otherwise the Gemini Developer API
    with GOOGLE_API_KEY (or the key the SDK finds in the environment).
    """
    if settings.use_vertex_ai:
        return genai.Client(
            vertexai=True,
            project=settings.vertex_project_id.strip() or None,
            location=settings.vertex_location,
        )

    api_key = settings.google_api_key.strip()
    if api_key:
        return genai.Client(api_key=api_key)
    return genai.Client()


def get_generation_client(components: Components) -> GenerationClientInterface:
    settings = components.get_component(Settings)

    retry_policy = RetryPolicy(
        max_attempts=settings.retry_max_attempts,
        initial_delay=settings.retry_initial_delay,
        backoff_multiplier=settings.retry_backoff_multiplier,
    )

    return GeminiImageClient(
        client=get_genai_client(settings),
        logger=components.get_component(Logger).get_logger("GeminiImageClient"),
        model_name=settings.image_model_name,
        retry_policy=retry_policy,
    )


def get_generation_service(components: Components) -> GenerationServiceInterface:
    settings = components.get_component(Settings)

    return GenerationService(
        client=get_generation_client(components),
        logger=components.get_component(Logger).get_logger("GenerationService"),
        history_repository=get_history_repository(components),
        output_count=settings.output_count,
    )
