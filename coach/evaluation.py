"""
Parsing of the scoring model's answer into an EvaluationResult.

Scores are checked for presence and type only. Their range is not clamped
and averageScore is not recomputed from the three sub-scores.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

SCORE_FIELDS = {
    "structureScore": "structure_score",
    "clarityScore": "clarity_score",
    "technicalScore": "technical_score",
    "averageScore": "average_score",
}


class EvaluationParseError(ValueError):
    pass


@dataclass
class EvaluationResult:
    structure_score: float
    clarity_score: float
    technical_score: float
    average_score: float
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    coaching_tip: str = ""
    follow_up_question: str = ""


# Returned to the learner when the scoring call fails.
FALLBACK_EVALUATION = EvaluationResult(
    structure_score=7,
    clarity_score=8,
    technical_score=6,
    average_score=7,
    strengths=[
        "Good problem decomposition",
        "Clear logical flow",
        "Mentioned relevant technologies",
    ],
    improvements=[
        "Could discuss trade-offs more explicitly",
        "Missing error handling considerations",
        "Add more specific technical details",
    ],
    coaching_tip="Start with clarifying requirements before jumping into the solution.",
    follow_up_question="How would you scale this system to handle 10x the current traffic?",
)


def extract_json_text(raw: str) -> str:
    """Strip markdown fences or surrounding prose from a model reply."""
    s = raw.strip()

    if s.startswith("```"):
        s = s.strip("`").strip()
        if s.lower().startswith("json"):
            s = s[4:].strip()

    if s.startswith("{") and s.endswith("}"):
        return s

    first = s.find("{")
    last = s.rfind("}")
    if first != -1 and last > first:
        return s[first : last + 1]
    return s


def _require_score(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EvaluationParseError(f"Missing or non-numeric '{key}': {value!r}")
    return value


def _str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key, [])
    if not isinstance(value, list):
        return []
    return [str(x) for x in value]


def parse_evaluation(data: Dict[str, Any]) -> EvaluationResult:
    if not isinstance(data, dict):
        raise EvaluationParseError("Evaluation must be a JSON object")

    scores = {attr: _require_score(data, key) for key, attr in SCORE_FIELDS.items()}
    return EvaluationResult(
        **scores,
        strengths=_str_list(data, "strengths"),
        improvements=_str_list(data, "improvements"),
        coaching_tip=str(data.get("coachingTip", "")),
        follow_up_question=str(data.get("followUpQuestion", "")),
    )


def parse_evaluation_text(raw: str) -> EvaluationResult:
    try:
        data = json.loads(extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise EvaluationParseError(f"Invalid JSON from scoring model: {raw[:200]}") from e
    return parse_evaluation(data)
