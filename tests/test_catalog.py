import pytest

from curriculum.catalog import (
    Catalog,
    CatalogError,
    build_catalog,
    default_catalog,
    load_catalog,
)
from curriculum.models import Badge, Level, Question, difficulty_rank, difficulty_stars


def _raw_catalog():
    return {
        "levels": [
            {
                "id": 1,
                "name": "Basics",
                "difficulty": "Easy",
                "questions": [
                    {"id": "a1", "question": "What is a list?"},
                    {"id": "a2", "question": "What is a dict?"},
                ],
            },
            {
                "id": 2,
                "name": "More",
                "difficulty": "Medium",
                "questions": [{"id": "b1", "question": "What is a set?"}],
            },
        ],
        "badges": [
            {"id": "basics_badge", "name": "Basics", "level_id": 1, "required_avg_score": 8},
            {"id": "streak_master", "name": "Streak", "level_id": None},
        ],
    }


def test_default_catalog_shape():
    catalog = default_catalog()
    assert [lvl.id for lvl in catalog.levels] == [1, 2, 3, 4]
    assert all(len(lvl.questions) == 5 for lvl in catalog.levels)
    assert catalog.total_questions == 20
    assert len(catalog.badges) == 9


def test_default_catalog_difficulties():
    catalog = default_catalog()
    assert [lvl.difficulty for lvl in catalog.levels] == ["Easy", "Medium", "Medium", "Hard"]


def test_default_catalog_streak_badge():
    badge = default_catalog().badge_by_id("streak_master")
    assert badge is not None
    assert badge.is_streak_badge
    assert badge.level_id is None


def test_level_by_id():
    catalog = default_catalog()
    level = catalog.level_by_id(2)
    assert level.name == "Core DS & Algorithms"
    assert catalog.level_by_id(99) is None


def test_question_by_id():
    catalog = default_catalog()
    question = catalog.question_by_id(1, "l1q3")
    assert question.topic == "APIs"
    assert question.level_id == 1
    assert question.expected_focus_areas == ("Clarity", "Simplification")


def test_question_by_id_wrong_level():
    catalog = default_catalog()
    assert catalog.question_by_id(2, "l1q3") is None
    assert catalog.question_by_id(99, "l1q3") is None


def test_find_question_across_levels():
    catalog = default_catalog()
    assert catalog.find_question("l3q2").level_id == 3
    assert catalog.find_question("l1q5").topic == "Version Control"
    assert catalog.find_question("l9q1") is None


def test_question_order_preserved():
    level = default_catalog().level_by_id(1)
    assert level.question_ids == ("l1q1", "l1q2", "l1q3", "l1q4", "l1q5")


def test_build_catalog_fills_question_level_id():
    catalog = build_catalog(_raw_catalog())
    assert catalog.question_by_id(2, "b1").level_id == 2
    assert catalog.total_questions == 3


def test_levels_sorted_by_id():
    raw = _raw_catalog()
    raw["levels"].reverse()
    catalog = build_catalog(raw)
    assert [lvl.id for lvl in catalog.levels] == [1, 2]


def test_non_contiguous_level_ids_rejected():
    raw = _raw_catalog()
    raw["levels"][1]["id"] = 3
    with pytest.raises(CatalogError):
        build_catalog(raw)


def test_empty_level_rejected():
    raw = _raw_catalog()
    raw["levels"][1]["questions"] = []
    with pytest.raises(CatalogError, match="no questions"):
        build_catalog(raw)


def test_duplicate_question_ids_rejected():
    raw = _raw_catalog()
    raw["levels"][1]["questions"][0]["id"] = "a1"
    with pytest.raises(CatalogError, match="Duplicate question"):
        build_catalog(raw)


def test_mismatched_question_level_rejected():
    raw = _raw_catalog()
    raw["levels"][0]["questions"][0]["level_id"] = 2
    with pytest.raises(CatalogError):
        build_catalog(raw)


def test_unknown_difficulty_rejected():
    raw = _raw_catalog()
    raw["levels"][0]["difficulty"] = "Impossible"
    with pytest.raises(CatalogError, match="difficulty"):
        build_catalog(raw)


def test_duplicate_badge_rejected():
    raw = _raw_catalog()
    raw["badges"].append({"id": "basics_badge", "name": "Again", "level_id": 1})
    with pytest.raises(CatalogError, match="Duplicate badge"):
        build_catalog(raw)


def test_badge_for_unknown_level_rejected():
    raw = _raw_catalog()
    raw["badges"][0]["level_id"] = 7
    with pytest.raises(CatalogError, match="unknown level"):
        build_catalog(raw)


def test_malformed_level_entry_rejected():
    raw = _raw_catalog()
    del raw["levels"][0]["name"]
    with pytest.raises(CatalogError, match="Malformed level"):
        build_catalog(raw)


def test_non_mapping_rejected():
    with pytest.raises(CatalogError):
        build_catalog(["not", "a", "mapping"])


def test_empty_catalog_rejected():
    with pytest.raises(CatalogError):
        Catalog(levels=[])


def test_catalog_error_is_value_error():
    assert issubclass(CatalogError, ValueError)


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "path.yaml"
    path.write_text(
        """
levels:
  - id: 1
    name: Only
    difficulty: Hard
    questions:
      - id: x1
        question: Why?
badges: []
""",
        encoding="utf-8",
    )
    catalog = load_catalog(path)
    assert catalog.level_by_id(1).difficulty == "Hard"
    assert catalog.badges == []


def test_load_catalog_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("levels: [unclosed", encoding="utf-8")
    with pytest.raises(CatalogError, match="Invalid YAML"):
        load_catalog(path)


def test_direct_construction():
    level = Level(
        id=1,
        name="Solo",
        difficulty="Easy",
        description="",
        unlock_requirement="",
        questions=(Question(id="s1", level_id=1, question="?", topic="t"),),
    )
    catalog = Catalog([level], [Badge(id="b", name="B", level_id=1, required_avg_score=5.0)])
    assert catalog.level_by_id(1) is level
    assert catalog.badge_by_id("missing") is None


def test_difficulty_helpers():
    assert difficulty_rank("Easy") == 1
    assert difficulty_rank("Hard") == 3
    assert difficulty_stars("Medium") == "⭐⭐"
