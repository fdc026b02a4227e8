import logging
import os
import sqlite3
from typing import List

from typetutor.app.errors import DatabaseError
from typetutor.core.config import DB_PATH
from typetutor.core.models import SessionSummary

logger = logging.getLogger(__name__)


def _ensure_schema(conn):
    conn.execute("""
    CREATE TABLE IF NOT EXISTS results(
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        practice_type TEXT NOT NULL,
        items_completed INTEGER,
        total_characters INTEGER,
        correct_characters INTEGER,
        elapsed_ms INTEGER,
        wpm INTEGER,
        accuracy INTEGER,
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
    """)


def get_conn(db_path: str = DB_PATH):
    folder = os.path.dirname(db_path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    conn = sqlite3.connect(db_path)
    _ensure_schema(conn)
    return conn


def insert_result(summary: SessionSummary, db_path: str = DB_PATH) -> int:
    conn = None
    try:
        conn = get_conn(db_path)
        cur = conn.cursor()
        cur.execute(
            "INSERT INTO results(practice_type, items_completed, total_characters, "
            "correct_characters, elapsed_ms, wpm, accuracy) VALUES (?,?,?,?,?,?,?)",
            (summary.practice_type, summary.items_completed, summary.total_characters,
             summary.correct_characters, summary.elapsed_ms, summary.wpm, summary.accuracy),
        )
        conn.commit()
        return cur.lastrowid
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        if conn is not None:
            conn.close()


def recent_results(limit: int = 20, db_path: str = DB_PATH) -> List[SessionSummary]:
    conn = None
    try:
        conn = get_conn(db_path)
        rows = conn.execute(
            "SELECT practice_type, items_completed, total_characters, correct_characters, "
            "elapsed_ms, wpm, accuracy FROM results ORDER BY id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [SessionSummary(*row) for row in rows]
    except sqlite3.Error as e:
        raise DatabaseError(str(e)) from e
    finally:
        if conn is not None:
            conn.close()


class ResultRecorder:
    """Slot target for PracticeEngine.finished; stores each summary once."""

    def __init__(self, db_path: str = DB_PATH):
        self.db_path = db_path

    def record(self, summary: SessionSummary):
        try:
            insert_result(summary, self.db_path)
        except DatabaseError:
            logger.exception("Failed to save session result")
