import json
import time
import uuid

from app.components.database.db_interface import DBInterface
from app.entities.history import GenerationMode, HistoryEntry
from app.entities.image import ImagePayload
from app.repositories.history_repository.history_repository_interface import (
    HistoryRepositoryInterface,
)

DEFAULT_HISTORY_LIMIT = 20


class SqliteHistoryRepository(HistoryRepositoryInterface):
    def __init__(self, db: DBInterface, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.db = db
        self.limit = limit
        self._init_table()

    def _init_table(self):
        query = """
        CREATE TABLE IF NOT EXISTS generation_history (
            id TEXT PRIMARY KEY,
            timestamp INTEGER NOT NULL,
            mode TEXT NOT NULL,
            images TEXT NOT NULL,
            prompt TEXT
        );
        """
        self.db.execute(query)
        self.db.commit()

    @staticmethod
    def _new_id(timestamp: int) -> str:
        return f"gen-{timestamp}-{uuid.uuid4().hex[:9]}"

    @staticmethod
    def _row_to_entry(row: dict) -> HistoryEntry:
        images = [
            ImagePayload.from_base64(item["base64"], item["mime_type"])
            for item in json.loads(row["images"])
        ]
        return {
            "id": row["id"],
            "timestamp": row["timestamp"],
            "mode": row["mode"],
            "images": images,
            "prompt": row["prompt"],
        }

    def add_entry(
        self,
        mode: GenerationMode,
        images: list[ImagePayload],
        prompt: str | None = None,
    ) -> HistoryEntry:
        timestamp = int(time.time() * 1000)
        entry: HistoryEntry = {
            "id": self._new_id(timestamp),
            "timestamp": timestamp,
            "mode": mode,
            "images": list(images),
            "prompt": prompt,
        }
        encoded_images = json.dumps(
            [
                {"mime_type": image.mime_type, "base64": image.to_base64()}
                for image in images
            ]
        )

        try:
            self.db.execute(
                """
                INSERT INTO generation_history (id, timestamp, mode, images, prompt)
                VALUES (?, ?, ?, ?, ?)
                """,
                (entry["id"], timestamp, mode, encoded_images, prompt),
            )
            # Keep only the newest entries.
            self.db.execute(
                """
                DELETE FROM generation_history
                WHERE id NOT IN (
                    SELECT id FROM generation_history
                    ORDER BY timestamp DESC, rowid DESC
                    LIMIT ?
                )
                """,
                (self.limit,),
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return entry

    def list_entries(self) -> list[HistoryEntry]:
        rows = self.db.execute_and_fetch(
            """
            SELECT id, timestamp, mode, images, prompt
            FROM generation_history
            ORDER BY timestamp DESC, rowid DESC
            """
        )
        return [self._row_to_entry(row) for row in rows]

    def delete_entry(self, entry_id: str) -> bool:
        existing = self.db.execute_and_fetchone(
            "SELECT id FROM generation_history WHERE id = ?", (entry_id,)
        )
        if existing is None:
            return False
        self.db.execute("DELETE FROM generation_history WHERE id = ?", (entry_id,))
        self.db.commit()
        return True

    def clear(self) -> None:
        self.db.execute("DELETE FROM generation_history")
        self.db.commit()
