"""JSON request bodies for the POST endpoints. Field names follow the camelCase wire format."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── Data hub ──────────────────────────────────────────────────────────────────

class FarmDataUpdate(_Body):
    farm_id:       str = Field(alias="farmId")
    field_updates: list[dict[str, Any]] = Field(default_factory=list, alias="fieldUpdates")


class ClearCacheRequest(_Body):
    category: Optional[str] = None


# ── Guest sessions ────────────────────────────────────────────────────────────

class PreferencesUpdate(_Body):
    preferences: dict[str, Any] = Field(default_factory=dict)


class SessionProgressUpdate(_Body):
    module_id:   Optional[str] = Field(None, alias="moduleId")
    xp_gained:   int = Field(0, ge=0, alias="xpGained")
    achievement: Optional[str] = None


class FarmLocationUpdate(_Body):
    lat:  float = Field(ge=-90, le=90)
    lng:  float = Field(ge=-180, le=180)
    name: Optional[str] = None


class InteractionEvent(_Body):
    page:   str
    action: str
    data:   Any = None


class AnalyticsEvent(_Body):
    event: str
    page:  Optional[str] = None
    data:  Any = None


# ── Learning hub ──────────────────────────────────────────────────────────────

class ModuleCompletion(_Body):
    module_id:  str = Field(alias="moduleId")
    score:      Optional[float] = Field(None, ge=0, le=100)
    time_spent: Optional[int] = Field(None, ge=0, alias="timeSpent")


class AssessmentSubmission(_Body):
    assessment_id: str = Field(alias="assessmentId")
    answers:       list[int]
