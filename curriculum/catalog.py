"""
Read-only curriculum lookups.

A catalog is loaded from a YAML data file and validated once at load time,
so the progression code can assume ids are contiguous and unique.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from curriculum.models import DIFFICULTIES, Badge, Level, Question

DATA_PATH = Path(__file__).parent / "data"
DEFAULT_CATALOG_FILE = DATA_PATH / "tech.yaml"


class CatalogError(ValueError):
    pass


class Catalog:
    def __init__(self, levels: Sequence[Level], badges: Sequence[Badge] = ()):
        self.levels: List[Level] = sorted(levels, key=lambda lvl: lvl.id)
        self.badges: List[Badge] = list(badges)
        validate_catalog(self.levels, self.badges)
        self._levels_by_id: Dict[int, Level] = {lvl.id: lvl for lvl in self.levels}
        self._badges_by_id: Dict[str, Badge] = {b.id: b for b in self.badges}

    def level_by_id(self, level_id: int) -> Optional[Level]:
        return self._levels_by_id.get(level_id)

    def question_by_id(self, level_id: int, question_id: str) -> Optional[Question]:
        level = self.level_by_id(level_id)
        if level is None:
            return None
        for question in level.questions:
            if question.id == question_id:
                return question
        return None

    def find_question(self, question_id: str) -> Optional[Question]:
        """Look a question up across all levels; ids are unique catalog-wide."""
        for level in self.levels:
            for question in level.questions:
                if question.id == question_id:
                    return question
        return None

    def badge_by_id(self, badge_id: str) -> Optional[Badge]:
        return self._badges_by_id.get(badge_id)

    @property
    def total_questions(self) -> int:
        return sum(len(lvl.questions) for lvl in self.levels)


def validate_catalog(levels: Sequence[Level], badges: Sequence[Badge]):
    """Raise CatalogError if the levels or badges are not well-formed."""
    if not levels:
        raise CatalogError("Catalog has no levels")

    expected_ids = list(range(1, len(levels) + 1))
    actual_ids = [lvl.id for lvl in levels]
    if actual_ids != expected_ids:
        raise CatalogError(f"Level ids must be contiguous from 1, got {actual_ids}")

    seen_questions = set()
    for level in levels:
        if level.difficulty not in DIFFICULTIES:
            raise CatalogError(
                f"Level {level.id} has unknown difficulty '{level.difficulty}'"
            )
        if not level.questions:
            raise CatalogError(f"Level {level.id} has no questions")
        for question in level.questions:
            if question.level_id != level.id:
                raise CatalogError(
                    f"Question {question.id} belongs to level {question.level_id}, "
                    f"listed under level {level.id}"
                )
            if question.id in seen_questions:
                raise CatalogError(f"Duplicate question id '{question.id}'")
            seen_questions.add(question.id)

    seen_badges = set()
    for badge in badges:
        if badge.id in seen_badges:
            raise CatalogError(f"Duplicate badge id '{badge.id}'")
        seen_badges.add(badge.id)
        if badge.level_id is not None and badge.level_id not in actual_ids:
            raise CatalogError(
                f"Badge {badge.id} references unknown level {badge.level_id}"
            )


def build_catalog(raw: dict) -> Catalog:
    """Build a Catalog from the parsed YAML structure."""
    if not isinstance(raw, dict):
        raise CatalogError("Catalog data must be a mapping")

    levels = []
    for lvl in raw.get("levels", []):
        try:
            level_id = int(lvl["id"])
            questions = tuple(
                Question(
                    id=str(q["id"]),
                    level_id=int(q.get("level_id", level_id)),
                    question=q["question"],
                    topic=q.get("topic", ""),
                    expected_focus_areas=tuple(q.get("expected_focus_areas", [])),
                )
                for q in lvl.get("questions", [])
            )
            levels.append(
                Level(
                    id=level_id,
                    name=lvl["name"],
                    difficulty=lvl.get("difficulty", "Easy"),
                    description=lvl.get("description", ""),
                    unlock_requirement=lvl.get("unlock_requirement", ""),
                    questions=questions,
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed level entry: {lvl!r}") from e

    badges = []
    for b in raw.get("badges", []):
        try:
            level_id = b.get("level_id")
            badges.append(
                Badge(
                    id=b["id"],
                    name=b["name"],
                    emoji=b.get("emoji", ""),
                    description=b.get("description", ""),
                    level_id=int(level_id) if level_id is not None else None,
                    required_avg_score=float(b.get("required_avg_score", 0.0)),
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Malformed badge entry: {b!r}") from e

    return Catalog(levels, badges)


def load_catalog(path=None) -> Catalog:
    file = Path(path) if path else DEFAULT_CATALOG_FILE
    try:
        raw = yaml.safe_load(file.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {file}") from e
    return build_catalog(raw)


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The packaged tech interview learning path."""
    return load_catalog()
