import copy
from dataclasses import dataclass, field, replace
from typing import List, Optional

from loguru import logger

from curriculum.catalog import Catalog, default_catalog
from memory.models import LearningPathState, LevelProgress, QuestionScore
from memory.progression import (
    STREAK_MIN_SCORE,
    compute_level_average,
    evaluate_badges,
    is_level_unlockable,
    level_status_for,
)


@dataclass
class RecordResult:
    state: LearningPathState
    new_badges: List[str] = field(default_factory=list)


def create_default_state(catalog: Optional[Catalog] = None) -> LearningPathState:
    catalog = catalog or default_catalog()
    levels = [
        LevelProgress(
            level_id=level.id,
            status="in_progress" if i == 0 else "locked",
        )
        for i, level in enumerate(catalog.levels)
    ]
    return LearningPathState(
        levels=levels,
        total_questions=catalog.total_questions,
    )


def score_from_evaluation(question_id: str, evaluation) -> QuestionScore:
    """Build a QuestionScore from a scoring result; average_score is taken as given."""
    return QuestionScore(
        question_id=question_id,
        structure_score=evaluation.structure_score,
        clarity_score=evaluation.clarity_score,
        technical_score=evaluation.technical_score,
        average_score=evaluation.average_score,
    )


def record_score(
    state: LearningPathState,
    level_id: int,
    question_id: str,
    score: QuestionScore,
    catalog: Optional[Catalog] = None,
) -> RecordResult:
    """
    Merge one scored answer into the learning path.

    Works on a copy: the passed-in state is never modified. Unknown level or
    question ids leave the state untouched and award nothing.
    """
    catalog = catalog or default_catalog()

    level = catalog.level_by_id(level_id)
    if level is None or state.level(level_id) is None:
        logger.warning(f"Ignoring score for unknown level {level_id}")
        return RecordResult(state=state)
    if catalog.question_by_id(level_id, question_id) is None:
        logger.warning(f"Ignoring score for unknown question {question_id} in level {level_id}")
        return RecordResult(state=state)

    next_state = copy.deepcopy(state)
    progress = next_state.level(level_id)
    was_completed = progress.status == "completed"

    score = replace(score, question_id=question_id)
    progress.scores[question_id] = score

    if question_id not in progress.completed_questions:
        progress.completed_questions.append(question_id)

    progress.avg_score = compute_level_average(progress.scores.values())
    progress.status = level_status_for(progress, level)
    logger.debug(
        f"Level {level_id}: {question_id} scored {score.average_score}, "
        f"avg {progress.avg_score}, status {progress.status}"
    )

    if progress.status == "completed" and not was_completed:
        _unlock_next_level(next_state, progress, level)

    next_state.total_questions_completed = sum(
        len(lp.completed_questions) for lp in next_state.levels
    )

    if score.average_score >= STREAK_MIN_SCORE:
        next_state.streak_count += 1
    else:
        next_state.streak_count = 0

    new_badges = evaluate_badges(next_state, catalog)
    if new_badges:
        next_state.earned_badges.extend(new_badges)
        logger.info(f"Badges earned: {', '.join(new_badges)}")

    return RecordResult(state=next_state, new_badges=new_badges)


def _unlock_next_level(state: LearningPathState, progress: LevelProgress, level):
    next_progress = state.level(level.id + 1)
    if next_progress is None or next_progress.status != "locked":
        return
    if is_level_unlockable(progress, level):
        next_progress.status = "in_progress"
        logger.info(f"Level {next_progress.level_id} unlocked")
    else:
        logger.info(
            f"Level {level.id} completed with avg {progress.avg_score}; "
            f"level {next_progress.level_id} stays locked"
        )
