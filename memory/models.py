from dataclasses import dataclass, field
from typing import Dict, List, Optional


LEVEL_STATUSES = ["locked", "in_progress", "completed"]


@dataclass
class QuestionScore:
    question_id: str
    structure_score: float
    clarity_score: float
    technical_score: float
    average_score: float


@dataclass
class LevelProgress:
    level_id: int
    completed_questions: List[str] = field(default_factory=list)
    scores: Dict[str, QuestionScore] = field(default_factory=dict)
    avg_score: float = 0.0
    status: str = "locked"


@dataclass
class LearningPathState:
    levels: List[LevelProgress] = field(default_factory=list)
    earned_badges: List[str] = field(default_factory=list)
    total_questions_completed: int = 0
    total_questions: int = 0
    streak_count: int = 0

    def level(self, level_id: int) -> Optional[LevelProgress]:
        for progress in self.levels:
            if progress.level_id == level_id:
                return progress
        return None
