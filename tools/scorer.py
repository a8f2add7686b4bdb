import os

import requests
from loguru import logger

from coach.evaluation import EvaluationParseError, EvaluationResult, parse_evaluation_text
from coach.prompt_loader import build_scoring_prompt

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_TIMEOUT = float(os.getenv("GEMINI_TIMEOUT", "30"))
GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

GENERATION_CONFIG = {
    "temperature": 0.7,
    "maxOutputTokens": 1024,
}


class ScoringError(RuntimeError):
    pass


def _candidate_text(data: dict) -> str:
    try:
        return data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""


def score_answer(question: str, answer: str, domain: str = "tech") -> EvaluationResult:
    """Ask the scoring model to evaluate one answer. Raises ScoringError on any failure."""
    if not GEMINI_API_KEY:
        raise ScoringError("Gemini API key not configured.")

    prompt = build_scoring_prompt(domain, question, answer)
    url = GEMINI_URL.format(model=GEMINI_MODEL)
    body = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": GENERATION_CONFIG,
    }

    try:
        response = requests.post(
            url,
            params={"key": GEMINI_API_KEY},
            json=body,
            timeout=GEMINI_TIMEOUT,
        )
    except requests.RequestException as e:
        raise ScoringError(f"Scoring request failed: {e}") from e

    if response.status_code != 200:
        raise ScoringError(f"Scoring request failed: {response.text}")

    try:
        data = response.json()
    except ValueError as e:
        raise ScoringError("Scoring response was not JSON.") from e

    raw = _candidate_text(data)
    if not raw.strip():
        raise ScoringError("Empty response from scoring model.")

    try:
        result = parse_evaluation_text(raw)
    except EvaluationParseError as e:
        raise ScoringError(str(e)) from e

    logger.debug(f"Scored {domain} answer: average {result.average_score}")
    return result
