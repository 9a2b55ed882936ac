from abc import ABC, abstractmethod

from app.entities.history import GenerationMode, HistoryEntry
from app.entities.image import ImagePayload


class HistoryRepositoryInterface(ABC):
    @abstractmethod
    def add_entry(
        self,
        mode: GenerationMode,
        images: list[ImagePayload],
        prompt: str | None = None,
    ) -> HistoryEntry:
        """Save a result set; only the most recent entries are kept."""

    @abstractmethod
    def list_entries(self) -> list[HistoryEntry]:
        """Return saved entries, newest first."""

    @abstractmethod
    def delete_entry(self, entry_id: str) -> bool:
        """Delete one entry. Returns False if it did not exist."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every entry."""
