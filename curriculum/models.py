from dataclasses import dataclass
from typing import Optional, Tuple


DIFFICULTIES = ["Easy", "Medium", "Hard"]

STREAK_BADGE_ID = "streak_master"


@dataclass(frozen=True)
class Question:
    id: str
    level_id: int
    question: str
    topic: str
    expected_focus_areas: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Level:
    id: int
    name: str
    difficulty: str
    description: str
    unlock_requirement: str
    questions: Tuple[Question, ...] = ()

    @property
    def question_ids(self) -> Tuple[str, ...]:
        return tuple(q.id for q in self.questions)


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    emoji: str = ""
    description: str = ""
    level_id: Optional[int] = None
    required_avg_score: float = 0.0

    @property
    def is_streak_badge(self) -> bool:
        return self.level_id is None


def difficulty_rank(difficulty: str) -> int:
    """1 for Easy, 2 for Medium, 3 for Hard."""
    return DIFFICULTIES.index(difficulty) + 1


def difficulty_stars(difficulty: str) -> str:
    return "⭐" * difficulty_rank(difficulty)
