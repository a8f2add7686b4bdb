"""Curated practice questions per interview domain, outside the learning path."""

import random
from functools import lru_cache
from pathlib import Path
from typing import Dict, List

import yaml

from curriculum.catalog import DATA_PATH, CatalogError

DEFAULT_BANK_FILE = DATA_PATH / "practice.yaml"


def build_question_bank(raw: dict) -> Dict[str, List[str]]:
    if not isinstance(raw, dict) or not isinstance(raw.get("domains"), dict):
        raise CatalogError("Question bank must map 'domains' to question lists")

    bank = {}
    for domain, questions in raw["domains"].items():
        if not isinstance(questions, list) or not questions:
            raise CatalogError(f"Domain '{domain}' has no practice questions")
        bank[str(domain)] = [str(q) for q in questions]
    return bank


def load_question_bank(path=None) -> Dict[str, List[str]]:
    file = Path(path) if path else DEFAULT_BANK_FILE
    try:
        raw = yaml.safe_load(file.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {file}") from e
    return build_question_bank(raw)


@lru_cache(maxsize=1)
def default_question_bank() -> Dict[str, List[str]]:
    return load_question_bank()


def random_question(domain: str, bank=None, rng=None) -> str:
    bank = bank if bank is not None else default_question_bank()
    if domain not in bank:
        raise ValueError(f"No practice questions for domain '{domain}'")
    return (rng or random).choice(bank[domain])
