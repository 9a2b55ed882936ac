from app.dependencies.components import get_components
from app.dependencies.repositories import get_history_repository
from app.dependencies.services import get_generation_service
from app.repositories.history_repository.history_repository_interface import (
    HistoryRepositoryInterface,
)
from app.services.GenerationService.generation_service_interface import (
    GenerationServiceInterface,
)


def bootstrap_generation_service(
    env: str = "development",
    env_file: str | None = ".env",
) -> GenerationServiceInterface:
    components = get_components(env=env, env_file=env_file)
    return get_generation_service(components)


def bootstrap_history(
    env: str = "development",
    env_file: str | None = ".env",
) -> HistoryRepositoryInterface:
    components = get_components(env=env, env_file=env_file)
    return get_history_repository(components)
