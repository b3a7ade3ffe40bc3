# app/models/journal_models.py
from datetime import date, datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class EntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date
    answer_1: str = ""
    answer_2: str = ""
    answer_3: str = ""


class TodayView(BaseModel):
    date: date
    answer_1: str = ""
    answer_2: str = ""
    answer_3: str = ""


class ReflectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    week_start: date
    content: str
    created_at: Optional[datetime] = None


class DashboardView(BaseModel):
    email: str
    as_of: date
    current_reflection: Optional[ReflectionRead] = None
    past_reflections: List[ReflectionRead] = []
    entries: List[EntryRead] = []


class SkipReason(str, Enum):
    NO_API_KEY = "no_api_key"
    NO_ENTRIES = "no_entries"
    ALREADY_EXISTS = "already_exists"
    GENERATION_FAILED = "generation_failed"
    EMPTY_RESPONSE = "empty_response"


class ReflectionSkipped(BaseModel):
    status: Literal["skipped"] = "skipped"
    reason: SkipReason


class ReflectionGenerated(BaseModel):
    status: Literal["generated"] = "generated"
    reflection: ReflectionRead


ReflectionOutcome = Union[ReflectionGenerated, ReflectionSkipped]
