import json
import os
import sqlite3
from dataclasses import asdict

from memory.models import LearningPathState, LevelProgress, QuestionScore
from memory.tracker import create_default_state

DB_PATH = os.getenv("INTERVIEW_COACH_DB", "learning_path.db")


def init_db():
    conn = sqlite3.connect(DB_PATH)
    c = conn.cursor()
    c.execute(
        """
        CREATE TABLE IF NOT EXISTS learning_path (
            session_id TEXT PRIMARY KEY,
            data TEXT
        )
    """
    )
    conn.commit()
    conn.close()


init_db()


def state_to_dict(state: LearningPathState) -> dict:
    return asdict(state)


def state_from_dict(raw: dict) -> LearningPathState:
    levels = []
    for lp in raw.get("levels", []):
        scores = {}
        for question_id, s in lp.get("scores", {}).items():
            s.setdefault("question_id", question_id)
            scores[question_id] = QuestionScore(**s)
        levels.append(
            LevelProgress(
                level_id=lp["level_id"],
                completed_questions=list(lp.get("completed_questions", [])),
                scores=scores,
                avg_score=lp.get("avg_score", 0.0),
                status=lp.get("status", "locked"),
            )
        )
    return LearningPathState(
        levels=levels,
        earned_badges=list(raw.get("earned_badges", [])),
        total_questions_completed=raw.get("total_questions_completed", 0),
        total_questions=raw.get("total_questions", 0),
        streak_count=raw.get("streak_count", 0),
    )


def load_state(session_id: str = "default", catalog=None) -> LearningPathState:
    conn = sqlite3.connect(DB_PATH)
    c = conn.cursor()
    c.execute("SELECT data FROM learning_path WHERE session_id = ?", (session_id,))
    row = c.fetchone()
    conn.close()

    if not row:
        return create_default_state(catalog)

    return state_from_dict(json.loads(row[0]))


def save_state(state: LearningPathState, session_id: str = "default"):
    conn = sqlite3.connect(DB_PATH)
    c = conn.cursor()
    c.execute(
        "REPLACE INTO learning_path (session_id, data) VALUES (?, ?)",
        (session_id, json.dumps(state_to_dict(state))),
    )
    conn.commit()
    conn.close()


def delete_state(session_id: str = "default"):
    conn = sqlite3.connect(DB_PATH)
    c = conn.cursor()
    c.execute("DELETE FROM learning_path WHERE session_id = ?", (session_id,))
    conn.commit()
    conn.close()
