"""
Frecency Service - Track and rank launched applications by usage.

Implements a Firefox-style frecency algorithm:
  frecency_score = launch_count * recency_weight

Where recency_weight depends on how recently the app was launched:
  - < 4 days: 100x multiplier
  - < 14 days: 70x multiplier
  - < 31 days: 50x multiplier
  - < 90 days: 30x multiplier
  - 90+ days: 10x multiplier

The dispatcher records every successful OpenApplication; the application
provider turns the score into a small relevance boost and uses the top apps
as empty-query suggestions.
"""

import sqlite3
import threading
import time
from pathlib import Path

from loguru import logger

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "omnibar" / "app_usage.db"


class FrecencyService:
    """
    Service for tracking application launches and calculating frecency scores.

    Methods:
        record_launch(app_id): Record an app launch
        get_top_apps(limit): Get top N apps by frecency score
        boost_for(app_id): Relevance bonus in [0.0, max_boost]
    """

    def __init__(self, db_path: Path | str = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        # Shared across provider and dispatcher threads; the lock serializes access
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_database()
        logger.debug(f"FrecencyService initialized with db at {self.db_path}")

    def _init_database(self):
        """Create database schema if it doesn't exist."""
        with self._lock:
            cursor = self._conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_stats (
                    app_id TEXT PRIMARY KEY,
                    launch_count INTEGER DEFAULT 0,
                    last_launch INTEGER,
                    created_at INTEGER
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_frecency
                ON app_stats(last_launch DESC, launch_count DESC)
            """)

            self._conn.commit()

    def record_launch(self, app_id: str) -> None:
        """
        Record an application launch.

        Args:
            app_id: Application path or desktop file ID
        """
        now = int(time.time())

        try:
            with self._lock:
                self._conn.execute("""
                    INSERT INTO app_stats (app_id, launch_count, last_launch, created_at)
                    VALUES (?, 1, ?, ?)
                    ON CONFLICT(app_id) DO UPDATE SET
                        launch_count = launch_count + 1,
                        last_launch = excluded.last_launch
                """, (app_id, now, now))
                self._conn.commit()
        except sqlite3.Error:
            logger.exception(f"Failed to record launch for {app_id}")
            return

        logger.debug(f"Recorded launch for {app_id}")

    def get_top_apps(self, limit: int = 12, min_launches: int = 1) -> list[tuple[str, float, int, int]]:
        """
        Get top applications ranked by frecency score.

        Args:
            limit: Maximum number of apps to return
            min_launches: Minimum launch count to include app

        Returns:
            List of tuples: (app_id, frecency_score, launch_count, last_launch)
            Sorted by frecency_score descending
        """
        with self._lock:
            rows = self._conn.execute("""
                SELECT app_id, launch_count, last_launch
                FROM app_stats
                WHERE launch_count >= ?
                ORDER BY last_launch DESC, launch_count DESC
            """, (min_launches,)).fetchall()

        results = [
            (app_id, self._calculate_frecency(launch_count, last_launch), launch_count, last_launch)
            for app_id, launch_count, last_launch in rows
        ]
        results.sort(key=lambda x: x[1], reverse=True)
        return results[:limit]

    def get_app_stats(self, app_id: str) -> tuple[int, int, int] | None:
        """
        Get statistics for a specific app.

        Returns:
            Tuple of (launch_count, last_launch, created_at) or None if not found
        """
        with self._lock:
            row = self._conn.execute("""
                SELECT launch_count, last_launch, created_at
                FROM app_stats
                WHERE app_id = ?
            """, (app_id,)).fetchone()
        return row if row else None

    def frecency_for(self, app_id: str) -> float:
        stats = self.get_app_stats(app_id)
        if stats is None:
            return 0.0
        launch_count, last_launch, _created = stats
        return self._calculate_frecency(launch_count, last_launch)

    def boost_for(self, app_id: str, max_boost: float = 0.1, saturation: float = 1000.0) -> float:
        """Map an app's frecency onto a relevance bonus capped at ``max_boost``."""
        score = self.frecency_for(app_id)
        return round(max_boost * min(score, saturation) / saturation, 4)

    def _calculate_frecency(self, launch_count: int, last_launch: int) -> float:
        """
        Calculate frecency score using Firefox's algorithm.

        Args:
            launch_count: Number of times app has been launched
            last_launch: Unix timestamp of last launch

        Returns:
            Frecency score (float)
        """
        age_days = (time.time() - last_launch) / (24 * 3600)

        if age_days < 4:
            recency_weight = 100
        elif age_days < 14:
            recency_weight = 70
        elif age_days < 31:
            recency_weight = 50
        elif age_days < 90:
            recency_weight = 30
        else:
            recency_weight = 10

        return launch_count * recency_weight

    def close(self) -> None:
        with self._lock:
            self._conn.close()
