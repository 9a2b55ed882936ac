from app.bootstrap.components import Components
from app.bootstrap.settings import Settings
from app.components.database.db_interface import DBInterface
from app.repositories.history_repository.history_repository_interface import (
    HistoryRepositoryInterface,
)
from app.repositories.history_repository.sqlite_history_repository import (
    SqliteHistoryRepository,
)


def get_history_repository(components: Components) -> HistoryRepositoryInterface:
    settings = components.get_component(Settings)
    return SqliteHistoryRepository(
        components.get_component(DBInterface), limit=settings.history_limit
    )
