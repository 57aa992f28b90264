"""Loading and saving the catalog dataset."""

import json
import logging
import time

from .connection import Database
from .models import Dataset, ImportSession, ImportStatus, Run, Setup, TestDay, TireSet

logger = logging.getLogger(__name__)


class CatalogStore:
    """Reads and writes a Dataset, and keeps the import session log."""

    def __init__(self, db: Database):
        self.db = db

    def load(self) -> Dataset:
        conn = self.db.conn
        test_days = tuple(
            TestDay(
                key=row["key"],
                date=row["date"],
                venue=row["venue"],
                run_count=row["run_count"],
                notes=row["notes"],
            )
            for row in conn.execute("SELECT * FROM test_days ORDER BY position")
        )
        runs = tuple(
            Run(
                key=row["key"],
                test_day_key=row["test_day_key"],
                run_number=row["run_number"],
                venue=row["venue"],
                source_path=row["source_path"],
                size=row["size"],
                modified_at=row["modified_at_unix"],
                drivers=tuple(json.loads(row["drivers_json"])),
                notes=row["notes"],
                tags=tuple(json.loads(row["tags_json"])),
            )
            for row in conn.execute("SELECT * FROM runs ORDER BY position")
        )
        setups = tuple(
            Setup(
                key=row["key"],
                setup_id=row["setup_id"],
                name=row["name"],
                document=json.loads(row["document_json"]),
            )
            for row in conn.execute("SELECT * FROM setups ORDER BY position")
        )
        tire_sets = tuple(
            TireSet(
                id=row["id"],
                compound=row["compound"],
                size=row["size"],
                notes=row["notes"],
            )
            for row in conn.execute("SELECT * FROM tire_sets ORDER BY position")
        )
        return Dataset(test_days=test_days, runs=runs, setups=setups, tire_sets=tire_sets)

    def save(self, dataset: Dataset) -> None:
        """Replace the stored catalog with dataset in one transaction."""
        with self.db.transaction() as conn:
            for table in ("test_days", "runs", "setups", "tire_sets"):
                conn.execute(f"DELETE FROM {table}")

            conn.executemany(
                """
                INSERT INTO test_days (key, position, date, venue, run_count, notes)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (d.key, i, d.date, d.venue, d.run_count, d.notes)
                    for i, d in enumerate(dataset.test_days)
                ],
            )
            conn.executemany(
                """
                INSERT INTO runs (
                    key, position, test_day_key, run_number, venue, source_path,
                    size, modified_at_unix, drivers_json, notes, tags_json
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        r.key,
                        i,
                        r.test_day_key,
                        r.run_number,
                        r.venue,
                        r.source_path,
                        r.size,
                        r.modified_at,
                        json.dumps(list(r.drivers)),
                        r.notes,
                        json.dumps(list(r.tags)),
                    )
                    for i, r in enumerate(dataset.runs)
                ],
            )
            conn.executemany(
                """
                INSERT INTO setups (key, position, setup_id, name, document_json)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (s.key, i, s.setup_id, s.name, json.dumps(s.document))
                    for i, s in enumerate(dataset.setups)
                ],
            )
            conn.executemany(
                """
                INSERT INTO tire_sets (id, position, compound, size, notes)
                VALUES (?, ?, ?, ?, ?)
                """,
                [
                    (t.id, i, t.compound, t.size, t.notes)
                    for i, t in enumerate(dataset.tire_sets)
                ],
            )

        logger.debug(
            "Saved catalog: %d test days, %d runs, %d setups, %d tire sets",
            len(dataset.test_days),
            len(dataset.runs),
            len(dataset.setups),
            len(dataset.tire_sets),
        )

    def get_setup(self, key: str) -> Setup | None:
        row = self.db.conn.execute(
            "SELECT key, setup_id, name, document_json FROM setups WHERE key = ?",
            (key,),
        ).fetchone()
        if not row:
            return None
        return Setup(
            key=row["key"],
            setup_id=row["setup_id"],
            name=row["name"],
            document=json.loads(row["document_json"]),
        )

    def begin_session(self, source_root: str) -> int:
        now = time.time()
        cursor = self.db.conn.execute(
            """
            INSERT INTO import_sessions (source_root, started_at_unix, started_at, status)
            VALUES (?, ?, ?, ?)
            """,
            (source_root, now, int(now), ImportStatus.RUNNING.value),
        )
        self.db.conn.commit()
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    def complete_session(
        self,
        session_id: int,
        files_seen: int,
        test_days_added: int,
        runs_added: int,
        setups_added: int,
        files_skipped: int,
    ) -> None:
        now = time.time()
        self.db.conn.execute(
            """
            UPDATE import_sessions
            SET status = ?, completed_at_unix = ?, completed_at = ?,
                files_seen = ?, test_days_added = ?, runs_added = ?,
                setups_added = ?, files_skipped = ?
            WHERE id = ?
            """,
            (
                ImportStatus.COMPLETED.value,
                now,
                int(now),
                files_seen,
                test_days_added,
                runs_added,
                setups_added,
                files_skipped,
                session_id,
            ),
        )
        self.db.conn.commit()

    def fail_session(self, session_id: int, error_message: str) -> None:
        now = time.time()
        self.db.conn.execute(
            """
            UPDATE import_sessions
            SET status = ?, completed_at_unix = ?, completed_at = ?, error_message = ?
            WHERE id = ?
            """,
            (ImportStatus.FAILED.value, now, int(now), error_message, session_id),
        )
        self.db.conn.commit()

    def recent_sessions(self, limit: int = 10) -> list[ImportSession]:
        rows = self.db.conn.execute(
            """
            SELECT * FROM import_sessions
            ORDER BY started_at_unix DESC, id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
        return [
            ImportSession(
                id=row["id"],
                source_root=row["source_root"],
                started_at_unix=row["started_at_unix"],
                started_at=row["started_at"],
                completed_at_unix=row["completed_at_unix"],
                completed_at=row["completed_at"],
                status=ImportStatus(row["status"]),
                error_message=row["error_message"],
                files_seen=row["files_seen"],
                test_days_added=row["test_days_added"],
                runs_added=row["runs_added"],
                setups_added=row["setups_added"],
                files_skipped=row["files_skipped"],
            )
            for row in rows
        ]
