"""
app/routers/learning_hub.py
Endpoints (all under /api/learning-hub, selected by ?action=):
  GET  modules             → ?level=beginner|intermediate|advanced|all
  GET  progress            → ?userId= (default "guest")
  GET  module-content      → ?moduleId= module + personalised content
  GET  assessments         → assessments without answer keys
  GET  achievement-unlock  → ?achievementId= (+50 XP once)
  GET  leaderboard         → user ranked among fixed competitors
  POST complete-module     → body {moduleId, score?, timeSpent?}
  POST submit-assessment   → body {assessmentId, answers}
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.core.aggregator import memoize
from app.core.cache import TTLCache
from app.core.config import API_PREFIX
from app.core.curriculum import (
    ASSESSMENTS,
    LEARNING_MODULES,
    dynamic_content,
    find_module,
    modules_for,
    public_assessment,
)
from app.core.deps import get_learning_cache, get_progress_store
from app.core.errors import BadRequestError, NotFoundError
from app.core.progress import LearningProgressStore
from app.models.bodies import AssessmentSubmission, ModuleCompletion

router = APIRouter(prefix=API_PREFIX + "/learning-hub", tags=["learning-hub"])
log = logging.getLogger("learning_hub")


@router.get("")
async def learning_hub_get(
    action:         Optional[str]         = Query(None),
    user_id:        str                   = Query("guest", alias="userId"),
    module_id:      Optional[str]         = Query(None, alias="moduleId"),
    level:          str                   = Query("all"),
    achievement_id: Optional[str]         = Query(None, alias="achievementId"),
    cache:          TTLCache              = Depends(get_learning_cache),
    store:          LearningProgressStore = Depends(get_progress_store),
):
    log.info(f"Learning Hub API: {action} ({user_id})")

    if action == "modules":
        res = memoize(cache, f"modules-{level}", "learning_content", lambda: modules_for(level))
        return res.envelope(cache, data={
            "modules":      res.data,
            "totalModules": len(res.data),
            "categories":   list(LEARNING_MODULES.keys()),
        })

    if action == "progress":
        return {"success": True, "data": store.progress(user_id)}

    if action == "module-content":
        if not module_id:
            raise BadRequestError("Module ID required")
        module = find_module(module_id)
        if module is None:
            raise NotFoundError("Module not found")
        progress = store.progress(user_id)
        res = memoize(
            cache,
            f"dynamic-{module_id}-{progress['level']}",
            "dynamic_content",
            lambda: dynamic_content(module_id, progress["level"]),
        )
        return res.envelope(cache, data={
            "module":  module,
            "dynamic": res.data,
            "userProgress": {
                "completed": module_id in progress["completedModules"],
                "currentXP": progress["currentXP"],
            },
        })

    if action == "assessments":
        progress = store.progress(user_id)
        return {
            "success": True,
            "data": {
                "assessments":              [public_assessment(a) for a in ASSESSMENTS],
                "userCompletedAssessments": list(progress["completedAssessments"].keys()),
            },
        }

    if action == "achievement-unlock":
        if not achievement_id:
            raise BadRequestError("Achievement ID required")
        return {"success": True, "data": store.unlock_achievement(user_id, achievement_id)}

    if action == "leaderboard":
        return {"success": True, "data": store.leaderboard(user_id)}

    raise BadRequestError("Invalid action")


@router.post("")
async def learning_hub_post(
    action:  Optional[str]            = Query(None),
    user_id: str                      = Query("guest", alias="userId"),
    payload: Optional[dict[str, Any]] = Body(None),
    store:   LearningProgressStore    = Depends(get_progress_store),
):
    payload = payload or {}

    if action == "complete-module":
        body = ModuleCompletion.model_validate(payload)
        result = store.complete_module(user_id, body.module_id, body.score, body.time_spent)
        return {"success": True, "data": result}

    if action == "submit-assessment":
        body = AssessmentSubmission.model_validate(payload)
        result = store.submit_assessment(user_id, body.assessment_id, body.answers)
        return {"success": True, "data": result}

    raise BadRequestError("Invalid POST action")
