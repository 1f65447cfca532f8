"""
SQLite State Store for Tidepool.

Provides portable persistence for:
- Reviewable items with their SM-2 scheduling fields
- Completed review sessions with their reward log
- The learner's game state (progress, inventory, crafted items, companions)

Timestamps are stored as ISO-8601 text.

Database location: ~/.tidepool/state.db
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date, datetime
from pathlib import Path

from loguru import logger

from src.island.inventory import Inventory, LearnerState
from src.island.progression import Progress
from src.srs.models import CardStatus, ReviewableItem

from .session import ReviewSession, ReviewStep

LEARNER_ID = "default"


def _iso(value: datetime | date | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class StateStore:
    """
    SQLite-backed persistence gateway for the session manager.

    Handles:
    - Item scheduling state (insert on add, upsert on review)
    - Session history with reward logs as JSON
    - A single learner-state row
    """

    DEFAULT_DB_PATH = Path.home() / ".tidepool" / "state.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the state store.

        Args:
            db_path: Custom database path (defaults to ~/.tidepool/state.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.info(f"StateStore initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """Initialize database schema."""
        cursor = self.conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS items (
                id TEXT PRIMARY KEY,
                front TEXT NOT NULL,
                back TEXT NOT NULL,
                repetitions INTEGER DEFAULT 0,
                ease_factor REAL DEFAULT 2.5,
                interval_days INTEGER DEFAULT 0,
                status TEXT DEFAULT 'new',
                next_due_at TEXT NOT NULL,
                last_reviewed_at TEXT,
                created_at TEXT,
                category TEXT,
                tags TEXT DEFAULT '[]'
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS review_sessions (
                id TEXT PRIMARY KEY,
                started_at TEXT NOT NULL,
                completed_at TEXT,
                cards_reviewed INTEGER DEFAULT 0,
                xp_earned INTEGER DEFAULT 0,
                reward_log TEXT DEFAULT '[]'
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS learner_state (
                learner_id TEXT PRIMARY KEY,
                level INTEGER DEFAULT 1,
                current_xp INTEGER DEFAULT 0,
                total_xp INTEGER DEFAULT 0,
                current_streak INTEGER DEFAULT 0,
                longest_streak INTEGER DEFAULT 0,
                last_activity_date TEXT,
                total_items_reviewed INTEGER DEFAULT 0,
                inventory TEXT DEFAULT '{}',
                crafted_items TEXT DEFAULT '[]',
                unlocked_companions TEXT DEFAULT '[]',
                active_companion TEXT
            )
        """)

        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_items_due
            ON items(next_due_at)
        """)

        self.conn.commit()

    # =========================================================================
    # Items
    # =========================================================================

    def load_items(self) -> list[ReviewableItem]:
        """Load every item, oldest first."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM items ORDER BY created_at, rowid")
        return [self._row_to_item(row) for row in cursor.fetchall()]

    def get_item(self, item_id: str) -> ReviewableItem | None:
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM items WHERE id = ?", (item_id,))
        row = cursor.fetchone()
        return self._row_to_item(row) if row else None

    def add_item(self, item: ReviewableItem) -> None:
        """Insert a new item."""
        self.save_item(item)
        logger.debug(f"Added item {item.id}")

    def save_item(self, item: ReviewableItem) -> None:
        """Insert or update an item's content and scheduling state."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO items
                (id, front, back, repetitions, ease_factor, interval_days, status,
                 next_due_at, last_reviewed_at, created_at, category, tags)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                front = excluded.front,
                back = excluded.back,
                repetitions = excluded.repetitions,
                ease_factor = excluded.ease_factor,
                interval_days = excluded.interval_days,
                status = excluded.status,
                next_due_at = excluded.next_due_at,
                last_reviewed_at = excluded.last_reviewed_at,
                category = excluded.category,
                tags = excluded.tags
        """,
            (
                item.id,
                item.front,
                item.back,
                item.repetitions,
                item.ease_factor,
                item.interval,
                item.status.value,
                _iso(item.next_due_at),
                _iso(item.last_reviewed_at),
                _iso(item.created_at),
                item.category,
                json.dumps(list(item.tags)),
            ),
        )
        self.conn.commit()

    @staticmethod
    def _row_to_item(row: sqlite3.Row) -> ReviewableItem:
        return ReviewableItem(
            id=row["id"],
            front=row["front"],
            back=row["back"],
            repetitions=row["repetitions"],
            ease_factor=row["ease_factor"],
            interval=row["interval_days"],
            status=CardStatus(row["status"]),
            next_due_at=datetime.fromisoformat(row["next_due_at"]),
            last_reviewed_at=_parse_datetime(row["last_reviewed_at"]),
            created_at=_parse_datetime(row["created_at"]),
            category=row["category"],
            tags=tuple(json.loads(row["tags"] or "[]")),
        )

    # =========================================================================
    # Learner State
    # =========================================================================

    def load_learner(self) -> LearnerState:
        """Load the learner's game state, or a fresh one if none is saved."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM learner_state WHERE learner_id = ?", (LEARNER_ID,))
        row = cursor.fetchone()
        if row is None:
            return LearnerState()

        last_activity = row["last_activity_date"]
        progress = Progress(
            level=row["level"],
            current_xp=row["current_xp"],
            total_xp=row["total_xp"],
            current_streak=row["current_streak"],
            longest_streak=row["longest_streak"],
            last_activity_date=date.fromisoformat(last_activity) if last_activity else None,
            total_items_reviewed=row["total_items_reviewed"],
        )
        return LearnerState(
            progress=progress,
            inventory=Inventory(json.loads(row["inventory"] or "{}")),
            crafted_items=json.loads(row["crafted_items"] or "[]"),
            unlocked_companions=json.loads(row["unlocked_companions"] or "[]"),
            active_companion=row["active_companion"],
        )

    def save_learner(self, learner: LearnerState) -> None:
        """Upsert the learner's game state."""
        progress = learner.progress
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO learner_state
                (learner_id, level, current_xp, total_xp, current_streak, longest_streak,
                 last_activity_date, total_items_reviewed, inventory, crafted_items,
                 unlocked_companions, active_companion)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(learner_id) DO UPDATE SET
                level = excluded.level,
                current_xp = excluded.current_xp,
                total_xp = excluded.total_xp,
                current_streak = excluded.current_streak,
                longest_streak = excluded.longest_streak,
                last_activity_date = excluded.last_activity_date,
                total_items_reviewed = excluded.total_items_reviewed,
                inventory = excluded.inventory,
                crafted_items = excluded.crafted_items,
                unlocked_companions = excluded.unlocked_companions,
                active_companion = excluded.active_companion
        """,
            (
                LEARNER_ID,
                progress.level,
                progress.current_xp,
                progress.total_xp,
                progress.current_streak,
                progress.longest_streak,
                _iso(progress.last_activity_date),
                progress.total_items_reviewed,
                json.dumps(learner.inventory.to_dict()),
                json.dumps(learner.crafted_items),
                json.dumps(learner.unlocked_companions),
                learner.active_companion,
            ),
        )
        self.conn.commit()

    # =========================================================================
    # Sessions
    # =========================================================================

    def save_session(self, session: ReviewSession) -> None:
        """Record a review session and its reward log."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT OR REPLACE INTO review_sessions
                (id, started_at, completed_at, cards_reviewed, xp_earned, reward_log)
            VALUES (?, ?, ?, ?, ?, ?)
        """,
            (
                session.id,
                _iso(session.started_at),
                _iso(session.completed_at),
                session.cards_reviewed,
                session.xp_earned,
                json.dumps([step.to_dict() for step in session.reward_log]),
            ),
        )
        self.conn.commit()
        logger.debug(f"Saved session {session.id}")

    def get_session_history(self, limit: int = 30) -> list[ReviewSession]:
        """Get recent session history, newest first."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM review_sessions
            ORDER BY started_at DESC
            LIMIT ?
        """,
            (limit,),
        )

        return [
            ReviewSession(
                id=row["id"],
                started_at=datetime.fromisoformat(row["started_at"]),
                completed_at=_parse_datetime(row["completed_at"]),
                cards_reviewed=row["cards_reviewed"],
                xp_earned=row["xp_earned"],
                reward_log=[ReviewStep.from_dict(d) for d in json.loads(row["reward_log"] or "[]")],
            )
            for row in cursor.fetchall()
        ]

    # =========================================================================
    # Stats
    # =========================================================================

    def get_stats(self) -> dict:
        """
        Get overall study statistics.

        Returns:
            Dictionary with aggregate stats
        """
        cursor = self.conn.cursor()

        cursor.execute("SELECT COUNT(*) as cnt FROM items")
        total_items = cursor.fetchone()["cnt"]

        cursor.execute("SELECT COUNT(*) as cnt FROM review_sessions WHERE completed_at IS NOT NULL")
        sessions = cursor.fetchone()["cnt"]

        cursor.execute("SELECT COALESCE(SUM(cards_reviewed), 0) as total FROM review_sessions")
        total_reviews = cursor.fetchone()["total"]

        cursor.execute("SELECT COALESCE(SUM(xp_earned), 0) as total FROM review_sessions")
        total_xp = cursor.fetchone()["total"]

        cursor.execute("SELECT AVG(ease_factor) as avg_ef FROM items WHERE repetitions > 0")
        avg_ease = cursor.fetchone()["avg_ef"] or 0

        return {
            "total_items": total_items,
            "sessions_completed": sessions,
            "total_reviews": total_reviews,
            "session_xp": total_xp,
            "avg_ease_factor": round(avg_ease, 2),
        }

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None
