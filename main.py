from typing import Optional

from fastapi import FastAPI
from loguru import logger
from mcp.server.fastmcp import FastMCP

from coach.evaluation import FALLBACK_EVALUATION
from coach.prompt_loader import DOMAINS
from curriculum.catalog import default_catalog
from curriculum.question_bank import random_question
from curriculum.models import difficulty_stars
from memory.models import LevelProgress, QuestionScore
from memory.progression import (
    current_level_id,
    next_unanswered_question_id,
    overall_percent,
    round_half_up,
    score_band,
    should_suggest_retry,
)
from memory.store import load_state, save_state, delete_state
from memory.tracker import record_score, score_from_evaluation
from tools.scorer import ScoringError, score_answer

MIN_ANSWER_LENGTH = 20

CURRENT_DOMAIN = "tech"

# session_id -> follow-up question from the last scored answer
LAST_FOLLOW_UPS = {}

mcp = FastMCP(
    name="Interview Coach MCP",
    instructions=(
        "An interview coach that scores practice answers and tracks progress "
        "through a leveled learning path."
    ),
)


@mcp.tool(
    name="set_interview_domain",
    description="Set the interview domain used for scoring: tech, finance, law",
)
def set_interview_domain(domain: str):
    global CURRENT_DOMAIN
    if domain not in DOMAINS:
        return f"Invalid domain. Choose from: {', '.join(DOMAINS)}"

    CURRENT_DOMAIN = domain
    return f"Interview domain set to '{domain}'"


@mcp.tool(
    name="get_learning_path",
    description="View overall learning path progress, level statuses, badges and streak",
)
def get_learning_path(session_id: str = "default"):
    catalog = default_catalog()
    state = load_state(session_id, catalog)

    levels = []
    for lp in state.levels:
        level = catalog.level_by_id(lp.level_id)
        if level is None:
            logger.warning(f"Skipping stored level {lp.level_id} missing from the catalog")
            continue
        levels.append(
            {
                "level_id": lp.level_id,
                "name": level.name,
                "difficulty": level.difficulty,
                "stars": difficulty_stars(level.difficulty),
                "unlock_requirement": level.unlock_requirement,
                "status": lp.status,
                "completed": len(lp.completed_questions),
                "total": len(level.questions),
                "avg_score": lp.avg_score,
            }
        )

    return {
        "total_questions_completed": state.total_questions_completed,
        "total_questions": state.total_questions,
        "overall_percent": round_half_up(overall_percent(state)),
        "current_level_id": current_level_id(state),
        "streak_count": state.streak_count,
        "earned_badges": list(state.earned_badges),
        "levels": levels,
    }


@mcp.tool(
    name="get_level_detail",
    description="View the questions of a level with scores and the next suggested question",
)
def get_level_detail(level_id: int, session_id: str = "default"):
    catalog = default_catalog()
    level = catalog.level_by_id(level_id)
    if level is None:
        return {"error": f"Unknown level {level_id}"}

    state = load_state(session_id, catalog)
    progress = state.level(level_id)
    if progress is None:
        progress = LevelProgress(level_id=level_id)

    questions = []
    for q in level.questions:
        score = progress.scores.get(q.id)
        entry = {
            "question_id": q.id,
            "question": q.question,
            "topic": q.topic,
            "expected_focus_areas": list(q.expected_focus_areas),
            "done": q.id in progress.completed_questions,
        }
        if score is not None:
            entry["average_score"] = score.average_score
            entry["band"] = score_band(score.average_score)
            entry["suggest_retry"] = should_suggest_retry(score)
        questions.append(entry)

    return {
        "level_id": level.id,
        "name": level.name,
        "description": level.description,
        "status": progress.status,
        "avg_score": progress.avg_score,
        "next_question_id": next_unanswered_question_id(level, progress.completed_questions),
        "questions": questions,
    }


@mcp.tool(
    name="get_next_question",
    description="Get the next unanswered question of a level",
)
def get_next_question(level_id: int, session_id: str = "default"):
    catalog = default_catalog()
    level = catalog.level_by_id(level_id)
    if level is None:
        return {"error": f"Unknown level {level_id}"}

    state = load_state(session_id, catalog)
    progress = state.level(level_id)
    if progress is None:
        progress = LevelProgress(level_id=level_id)
    if progress.status == "locked":
        return {"error": f"Level {level_id} is locked. {level.unlock_requirement}"}

    question_id = next_unanswered_question_id(level, progress.completed_questions)
    if question_id is None:
        return {"level_id": level_id, "question_id": None, "message": "Level complete"}

    question = catalog.question_by_id(level_id, question_id)
    return {
        "level_id": level_id,
        "question_id": question.id,
        "question": question.question,
        "topic": question.topic,
        "expected_focus_areas": list(question.expected_focus_areas),
    }


def _record(session_id: str, level_id: int, question_id: str, score: QuestionScore):
    catalog = default_catalog()
    state = load_state(session_id, catalog)
    progress = state.level(level_id)
    if progress is not None and progress.status == "locked":
        return {"error": f"Level {level_id} is locked. Complete the previous level first."}

    result = record_score(state, level_id, question_id, score, catalog)
    save_state(result.state, session_id)

    badges = [catalog.badge_by_id(b) for b in result.new_badges]
    progress = result.state.level(level_id)
    return {
        "level_status": progress.status if progress else None,
        "level_avg_score": progress.avg_score if progress else None,
        "streak_count": result.state.streak_count,
        "total_questions_completed": result.state.total_questions_completed,
        "new_badges": [
            {"id": b.id, "name": b.name, "emoji": b.emoji} for b in badges if b
        ],
    }


@mcp.tool(
    name="submit_answer",
    description=(
        "Score an interview answer. Pass a learning path question_id to score "
        "that question and record the result."
    ),
)
def submit_answer(
    question: str,
    answer: str,
    session_id: str = "default",
    level_id: Optional[int] = None,
    question_id: Optional[str] = None,
):
    if len(answer.strip()) < MIN_ANSWER_LENGTH:
        return {"error": f"Answer too short. Write at least {MIN_ANSWER_LENGTH} characters."}

    if question_id:
        catalog_question = default_catalog().find_question(question_id)
        if catalog_question is None:
            return {"error": f"Unknown question {question_id}"}
        if level_id is None:
            level_id = catalog_question.level_id
        elif level_id != catalog_question.level_id:
            return {"error": f"Question {question_id} is not in level {level_id}"}
        # learning path answers are scored against the catalog wording
        question = catalog_question.question

    try:
        evaluation = score_answer(question, answer, CURRENT_DOMAIN)
        fallback = False
    except ScoringError as e:
        logger.warning(f"Scoring failed, using fallback evaluation: {e}")
        evaluation = FALLBACK_EVALUATION
        fallback = True

    result = {
        "structure_score": evaluation.structure_score,
        "clarity_score": evaluation.clarity_score,
        "technical_score": evaluation.technical_score,
        "average_score": evaluation.average_score,
        "strengths": list(evaluation.strengths),
        "improvements": list(evaluation.improvements),
        "coaching_tip": evaluation.coaching_tip,
        "follow_up_question": evaluation.follow_up_question,
        "fallback": fallback,
    }
    if evaluation.follow_up_question:
        LAST_FOLLOW_UPS[session_id] = evaluation.follow_up_question

    if question_id:
        score = score_from_evaluation(question_id, evaluation)
        result["learning_path"] = _record(session_id, level_id, question_id, score)
    return result


@mcp.tool(
    name="get_practice_question",
    description="Get a random practice question for a domain (defaults to the current domain)",
)
def get_practice_question(domain: Optional[str] = None):
    domain = domain or CURRENT_DOMAIN
    try:
        question = random_question(domain)
    except ValueError:
        return {"error": f"Invalid domain. Choose from: {', '.join(DOMAINS)}"}
    return {"domain": domain, "question": question}


@mcp.tool(
    name="get_follow_up_question",
    description="Get the follow-up question suggested for the last scored answer",
)
def get_follow_up_question(session_id: str = "default"):
    question = LAST_FOLLOW_UPS.get(session_id)
    if not question:
        return {"error": "No follow-up yet. Submit an answer first."}
    return {"domain": CURRENT_DOMAIN, "question": question}


@mcp.tool(
    name="record_learning_score",
    description="Record an already-scored answer for a learning path question",
)
def record_learning_score(
    level_id: int,
    question_id: str,
    structure_score: float,
    clarity_score: float,
    technical_score: float,
    average_score: float,
    session_id: str = "default",
):
    score = QuestionScore(
        question_id=question_id,
        structure_score=structure_score,
        clarity_score=clarity_score,
        technical_score=technical_score,
        average_score=average_score,
    )
    return _record(session_id, level_id, question_id, score)


@mcp.tool(
    name="list_badges",
    description="List all badges and which ones have been earned",
)
def list_badges(session_id: str = "default"):
    catalog = default_catalog()
    state = load_state(session_id, catalog)
    return [
        {
            "id": b.id,
            "name": b.name,
            "emoji": b.emoji,
            "description": b.description,
            "earned": b.id in state.earned_badges,
        }
        for b in catalog.badges
    ]


@mcp.tool(
    name="reset_learning_path",
    description="Start the learning path over from level 1",
)
def reset_learning_path(session_id: str = "default"):
    delete_state(session_id)
    return f"Learning path reset for session '{session_id}'"


app = FastAPI()
app.mount("/", mcp.sse_app())
