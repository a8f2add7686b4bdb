"""
Pure rules of the learning path: level averages, unlocking, next-question
suggestion and badge eligibility.

Nothing here mutates its arguments; memory.tracker applies the results.
"""

import math
from typing import Callable, Dict, Iterable, List, Optional

from curriculum.catalog import Catalog
from curriculum.models import STREAK_BADGE_ID, Badge, Level
from memory.models import LearningPathState, LevelProgress, QuestionScore

UNLOCK_MIN_AVG = 6.0
STREAK_MIN_SCORE = 6.0
STREAK_TARGET = 3
RETRY_BELOW = 7.0

SCORE_BANDS = [
    (8.0, "strong"),
    (6.0, "passing"),
]


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def compute_level_average(scores: Iterable[QuestionScore]) -> float:
    values = [s.average_score for s in scores]
    if not values:
        return 0.0
    # sorted so float summation does not depend on answer order
    return round_half_up(math.fsum(sorted(values)) / len(values))


def _is_fully_completed(progress: LevelProgress, level: Level) -> bool:
    return len(progress.completed_questions) == len(level.questions)


def _completion_only(progress: LevelProgress, level: Level) -> bool:
    return _is_fully_completed(progress, level)


def _completion_with_quality_gate(progress: LevelProgress, level: Level) -> bool:
    return _is_fully_completed(progress, level) and progress.avg_score >= UNLOCK_MIN_AVG


# Level 1 has no quality gate; every other level uses the default rule.
UNLOCK_RULES: Dict[int, Callable[[LevelProgress, Level], bool]] = {
    1: _completion_only,
}
DEFAULT_UNLOCK_RULE = _completion_with_quality_gate


def is_level_unlockable(progress: LevelProgress, level: Level) -> bool:
    """True when finishing `level` with this progress unlocks the level after it."""
    rule = UNLOCK_RULES.get(level.id, DEFAULT_UNLOCK_RULE)
    return rule(progress, level)


def level_status_for(progress: LevelProgress, level: Level) -> str:
    if level.questions and _is_fully_completed(progress, level):
        return "completed"
    return "in_progress"


def next_unanswered_question_id(level: Level, completed: Iterable[str]) -> Optional[str]:
    done = set(completed)
    for question in level.questions:
        if question.id not in done:
            return question.id
    return None


def _streak_badge_earned(badge: Badge, state: LearningPathState) -> bool:
    return state.streak_count >= STREAK_TARGET


def _level_badge_earned(badge: Badge, state: LearningPathState) -> bool:
    progress = state.level(badge.level_id)
    return (
        progress is not None
        and progress.status == "completed"
        and progress.avg_score >= badge.required_avg_score
    )


BADGE_RULES: Dict[str, Callable[[Badge, LearningPathState], bool]] = {
    STREAK_BADGE_ID: _streak_badge_earned,
}


def badge_rule_for(badge: Badge) -> Callable[[Badge, LearningPathState], bool]:
    if badge.id in BADGE_RULES:
        return BADGE_RULES[badge.id]
    if badge.is_streak_badge:
        return _streak_badge_earned
    return _level_badge_earned


def evaluate_badges(state: LearningPathState, catalog: Catalog) -> List[str]:
    """Return ids of badges that qualify now and were not earned before, in catalog order."""
    earned = set(state.earned_badges)
    new_badges = []
    for badge in catalog.badges:
        if badge.id in earned:
            continue
        if badge_rule_for(badge)(badge, state):
            new_badges.append(badge.id)
    return new_badges


def overall_percent(state: LearningPathState) -> float:
    if state.total_questions <= 0:
        return 0.0
    return state.total_questions_completed / state.total_questions * 100


def current_level_id(state: LearningPathState) -> Optional[int]:
    for progress in state.levels:
        if progress.status == "in_progress":
            return progress.level_id
    return None


def score_band(score: float) -> str:
    for threshold, band in SCORE_BANDS:
        if score >= threshold:
            return band
    return "low"


def should_suggest_retry(score: QuestionScore) -> bool:
    return score.average_score < RETRY_BELOW
