"""
app/core/progress.py
═══════════════════════════════════════════════════════════════════════════════
Per-user learning progress for the learning hub (in memory, like sessions).

XP rules:
  • module completion  → the module's XP, once per module
  • assessment         → score = round(correct / total × 100)
                         XP = full reward if score > 70, else floor(reward × 0.5)
                         passed = score ≥ 70
  • achievement unlock → +50 XP, once per achievement
═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import math
import threading
from typing import Optional

from app.core.config import utc_date
from app.core.curriculum import (
    ACHIEVEMENT_XP_BONUS,
    COMPLETION_XP_DEFAULT,
    HIGH_ACHIEVER_SCORE,
    PASS_SCORE,
    find_assessment,
    find_module,
    level_for,
)
from app.core.errors import BadRequestError, NotFoundError

log = logging.getLogger("progress")

# Fixed rivals shown around the user on the leaderboard
LEADERBOARD_RIVALS: list[dict] = [
    {"name": "NASA Explorer",  "xp": 5420},
    {"name": "Farm Innovator", "xp": 4890},
    {"name": "Earth Observer", "xp": 1180},
    {"name": "Crop Master",    "xp": 980},
]
LEADERBOARD_TOTAL_USERS = 1247

DEFAULT_STUDY_MINUTES = 15


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def score_answers(assessment: dict, answers: list[int]) -> tuple[int, int, int]:
    """(score 0–100, correct answers, total questions)."""
    questions = assessment["questionsData"]
    total = len(questions)
    correct = sum(
        1 for i, answer in enumerate(answers)
        if i < total and questions[i]["correct"] == answer
    )
    score = _round_half_up(correct / (total or 1) * 100)
    return score, correct, total


def assessment_xp(reward: int, score: int) -> int:
    return reward if score > PASS_SCORE else math.floor(reward * 0.5)


class LearningProgressStore:
    def __init__(self):
        self._users: dict[str, dict] = {}
        self._lock = threading.Lock()

    def _user(self, user_id: str) -> dict:
        progress = self._users.get(user_id)
        if progress is None:
            progress = {
                "userId":               user_id,
                "currentXP":            0,
                "achievements":         [],
                "completedModules":     [],
                "completedAssessments": {},
                "currentModule":        None,
                "streakDays":           0,
                "totalStudyTime":       0,
            }
            self._users[user_id] = progress
        return progress

    @staticmethod
    def _view(progress: dict) -> dict:
        lvl = level_for(progress["currentXP"])
        return {
            **progress,
            "achievements":         list(progress["achievements"]),
            "completedModules":     list(progress["completedModules"]),
            "completedAssessments": dict(progress["completedAssessments"]),
            "level":                lvl["level"],
            "levelTitle":           lvl["title"],
            "nextLevel":            lvl["nextLevel"],
            "xpToNext":             lvl["xpToNext"],
        }

    def progress(self, user_id: str) -> dict:
        with self._lock:
            return self._view(self._user(user_id))

    def complete_module(
        self,
        user_id: str,
        module_id: str,
        score: Optional[float] = None,
        time_spent: Optional[int] = None,
    ) -> dict:
        module = find_module(module_id)
        if module is None:
            raise NotFoundError(f"Module '{module_id}' not found")

        with self._lock:
            p = self._user(user_id)
            awarded = 0
            if module_id not in p["completedModules"]:
                awarded = module.get("xp", COMPLETION_XP_DEFAULT)
                p["completedModules"].append(module_id)
                p["currentXP"] += awarded
                p["totalStudyTime"] += time_spent or DEFAULT_STUDY_MINUTES
                if p["currentModule"] == module_id:
                    p["currentModule"] = None
                log.info(f"{user_id} completed {module_id} (+{awarded} XP)")
            unlocked = []
            if score is not None and score > HIGH_ACHIEVER_SCORE:
                if self._grant(p, "high-achiever", "High Achiever", "Scored above 80 on a module"):
                    unlocked.append("high-achiever")
            return {
                "moduleId":              module_id,
                "xpAwarded":             awarded,
                "alreadyCompleted":      awarded == 0,
                "newXP":                 p["currentXP"],
                "unlockedAchievements":  unlocked,
            }

    def submit_assessment(self, user_id: str, assessment_id: str, answers: list[int]) -> dict:
        assessment = find_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError(f"Assessment '{assessment_id}' not found")
        if not isinstance(answers, list):
            raise BadRequestError("answers must be a list of option indexes")

        score, correct, total = score_answers(assessment, answers)
        xp = assessment_xp(assessment["xpReward"], score)
        with self._lock:
            p = self._user(user_id)
            p["currentXP"] += xp
            best = p["completedAssessments"].get(assessment_id, 0)
            p["completedAssessments"][assessment_id] = max(best, score)
            total_xp = p["currentXP"]
        return {
            "assessmentId":   assessment_id,
            "score":          score,
            "correctAnswers": correct,
            "totalQuestions": total,
            "xpEarned":       xp,
            "newTotalXP":     total_xp,
            "passed":         score >= PASS_SCORE,
        }

    def _grant(self, p: dict, achievement_id: str, title: str, description: str) -> Optional[dict]:
        """Record an achievement once. Caller holds the lock."""
        if any(a["id"] == achievement_id for a in p["achievements"]):
            return None
        achievement = {
            "id":          achievement_id,
            "title":       title,
            "description": description,
            "date":        utc_date(),
            "xpBonus":     ACHIEVEMENT_XP_BONUS,
        }
        p["achievements"].append(achievement)
        p["currentXP"] += ACHIEVEMENT_XP_BONUS
        return achievement

    def unlock_achievement(self, user_id: str, achievement_id: str) -> dict:
        with self._lock:
            p = self._user(user_id)
            granted = self._grant(p, achievement_id, "Learning Achievement",
                                  "Unlocked through dedicated learning")
            achievement = granted or next(a for a in p["achievements"] if a["id"] == achievement_id)
            return {
                "achievement":     achievement,
                "alreadyUnlocked": granted is None,
                "newXP":           p["currentXP"],
            }

    def leaderboard(self, user_id: str) -> dict:
        with self._lock:
            xp = self._user(user_id)["currentXP"]
        rows = [*LEADERBOARD_RIVALS, {"name": "You", "xp": xp}]
        rows.sort(key=lambda r: r["xp"], reverse=True)
        board = [
            {"rank": i + 1, "name": r["name"], "xp": r["xp"], "level": level_for(r["xp"])["title"]}
            for i, r in enumerate(rows)
        ]
        user_rank = next(r["rank"] for r in board if r["name"] == "You")
        return {"leaderboard": board, "userRank": user_rank, "totalUsers": LEADERBOARD_TOTAL_USERS}
