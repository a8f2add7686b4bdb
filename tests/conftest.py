import pytest

from curriculum.catalog import Catalog
from curriculum.models import Badge, Level, Question
from memory.models import QuestionScore


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    db_path = str(tmp_path / "test_learning_path.db")
    monkeypatch.setattr("memory.store.DB_PATH", db_path)
    from memory.store import init_db
    init_db()
    return db_path


def _level(level_id, difficulty="Easy", count=3):
    return Level(
        id=level_id,
        name=f"Level {level_id}",
        difficulty=difficulty,
        description=f"Description {level_id}",
        unlock_requirement="None" if level_id == 1 else f"Complete Level {level_id - 1}",
        questions=tuple(
            Question(
                id=f"l{level_id}q{n}",
                level_id=level_id,
                question=f"Question {n} of level {level_id}?",
                topic="Topic",
                expected_focus_areas=("Clarity",),
            )
            for n in range(1, count + 1)
        ),
    )


@pytest.fixture
def small_catalog():
    """Three levels of three questions, one badge for each of the first two levels plus the streak badge."""
    return Catalog(
        levels=[_level(1), _level(2, "Medium"), _level(3, "Hard")],
        badges=[
            Badge(id="first_steps", name="First Steps", level_id=1, required_avg_score=8.0),
            Badge(id="second_wind", name="Second Wind", level_id=2, required_avg_score=7.0),
            Badge(id="streak_master", name="Streak Master", level_id=None, required_avg_score=6.0),
        ],
    )


@pytest.fixture
def make_score():
    def _make(question_id, average, structure=None, clarity=None, technical=None):
        return QuestionScore(
            question_id=question_id,
            structure_score=average if structure is None else structure,
            clarity_score=average if clarity is None else clarity,
            technical_score=average if technical is None else technical,
            average_score=average,
        )

    return _make


@pytest.fixture
def sample_model_reply():
    return """```json
{
  "structureScore": 7,
  "clarityScore": 8,
  "technicalScore": 6,
  "averageScore": 7.2,
  "strengths": ["Clear example", "Good structure"],
  "improvements": ["Mention trade-offs"],
  "coachingTip": "Lead with the definition.",
  "followUpQuestion": "How would you index this table?"
}
```"""
