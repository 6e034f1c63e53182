import pytest

from app.core.curriculum import find_assessment, level_for, public_assessment
from app.core.errors import NotFoundError
from app.core.progress import LearningProgressStore, assessment_xp, score_answers


@pytest.fixture
def store():
    return LearningProgressStore()


def test_new_user_starts_empty(store):
    p = store.progress("new-user")
    assert p["currentXP"] == 0
    assert p["completedModules"] == []
    assert p["levelTitle"] == "Farm Novice"


def test_module_completion_awards_xp_once(store):
    first = store.complete_module("guest", "soil-moisture-basics")
    second = store.complete_module("guest", "soil-moisture-basics")
    assert first["xpAwarded"] == 150
    assert second["xpAwarded"] == 0
    assert second["alreadyCompleted"] is True
    p = store.progress("guest")
    assert p["currentXP"] == 150
    assert p["completedModules"] == ["soil-moisture-basics"]
    assert p["totalStudyTime"] == 15


def test_module_completion_uses_module_xp_and_time(store):
    result = store.complete_module("guest", "climate-adaptation", time_spent=42)
    assert result["xpAwarded"] == 500
    assert store.progress("guest")["totalStudyTime"] == 42


def test_unknown_module(store):
    with pytest.raises(NotFoundError):
        store.complete_module("guest", "no-such-module")


def test_high_score_unlocks_achievement_once(store):
    result = store.complete_module("guest", "intro-nasa-data", score=95)
    assert result["unlockedAchievements"] == ["high-achiever"]
    assert result["newXP"] == 100 + 50
    store.complete_module("guest", "soil-moisture-basics", score=90)
    p = store.progress("guest")
    assert [a["id"] for a in p["achievements"]] == ["high-achiever"]
    assert p["currentXP"] == 100 + 50 + 150


def test_users_are_independent(store):
    store.complete_module("alice", "intro-nasa-data")
    assert store.progress("bob")["currentXP"] == 0


def test_half_correct_assessment(store):
    result = store.submit_assessment("guest", "nasa-data-fundamentals", [1, 3])
    assert result["score"] == 50
    assert result["correctAnswers"] == 1
    assert result["totalQuestions"] == 2
    assert result["xpEarned"] == 150
    assert result["passed"] is False
    assert store.progress("guest")["completedAssessments"] == {"nasa-data-fundamentals": 50}


def test_perfect_assessment(store):
    result = store.submit_assessment("guest", "nasa-data-fundamentals", [1, 0])
    assert result["score"] == 100
    assert result["xpEarned"] == 300
    assert result["passed"] is True
    assert result["newTotalXP"] == 300


def test_extra_answers_are_ignored(store):
    result = store.submit_assessment("guest", "nasa-data-fundamentals", [1, 0, 2, 2])
    assert result["correctAnswers"] == 2


def test_unknown_assessment(store):
    with pytest.raises(NotFoundError):
        store.submit_assessment("guest", "nope", [0])


@pytest.mark.parametrize("score, xp", [(100, 300), (71, 300), (70, 150), (50, 150), (0, 150)])
def test_assessment_xp_rule(score, xp):
    assert assessment_xp(300, score) == xp


def test_score_rounds_half_up():
    assessment = {"questionsData": [{"correct": 0}] * 8}
    score, correct, total = score_answers(assessment, [0, 0, 0, 0, 0, 1, 1, 1])
    assert (score, correct, total) == (63, 5, 8)   # 62.5 → 63


def test_achievement_unlock_is_idempotent(store):
    first = store.unlock_achievement("guest", "data-explorer")
    again = store.unlock_achievement("guest", "data-explorer")
    assert first["alreadyUnlocked"] is False
    assert first["achievement"]["xpBonus"] == 50
    assert again["alreadyUnlocked"] is True
    assert again["newXP"] == 50


def test_leaderboard_ranks_user_by_xp(store):
    board = store.leaderboard("guest")
    assert board["userRank"] == 5
    assert board["totalUsers"] == 1247

    store.complete_module("guest", "climate-adaptation")
    store.complete_module("guest", "crop-yield-prediction")
    store.complete_module("guest", "weather-patterns")
    store.complete_module("guest", "ndvi-vegetation")
    board = store.leaderboard("guest")        # 1250 XP
    names = [row["name"] for row in board["leaderboard"]]
    assert names == ["NASA Explorer", "Farm Innovator", "You", "Earth Observer", "Crop Master"]
    assert board["userRank"] == 3


@pytest.mark.parametrize("xp, level, title", [
    (0, 1, "Farm Novice"),
    (499, 1, "Farm Novice"),
    (500, 2, "Farm Analyst"),
    (2000, 3, "Sustainability Expert"),
    (9000, 4, "NASA Agronomist"),
])
def test_level_for(xp, level, title):
    info = level_for(xp)
    assert info["level"] == level
    assert info["title"] == title


def test_public_assessment_hides_answers():
    public = public_assessment(find_assessment("nasa-data-fundamentals"))
    assert public["questions"] == 2
    assert all("correct" not in q and "explanation" not in q for q in public["questionsData"])


def test_repeat_high_score_reports_no_new_achievement(store):
    store.complete_module("guest", "intro-nasa-data", score=95)
    again = store.complete_module("guest", "intro-nasa-data", score=95)
    assert again["unlockedAchievements"] == []
    assert again["xpAwarded"] == 0
    assert again["newXP"] == 100 + 50
