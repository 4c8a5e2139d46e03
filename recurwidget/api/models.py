"""Request/response models for the widget endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from recurwidget.models.widget import WidgetState


class RuleValuesRequest(BaseModel):
    """Request model for seeding form values from a stored rule."""
    rrule: str = Field(..., description="Stored recurrence rule")
    reference: Optional[datetime] = Field(None, description="Field start date used to expand the rule")


class FormValuesRequest(BaseModel):
    """Request model carrying one delta's submitted widget values."""
    values: Dict[str, Any] = Field(default_factory=dict)


class FormValuesResponse(BaseModel):
    values: Dict[str, Any]


class RuleResponse(BaseModel):
    """Response for rule building. rrule is None when no repeat was picked."""
    rrule: Optional[str]


class MassageRequest(BaseModel):
    deltas: List[Dict[str, Any]] = Field(default_factory=list)


class MassageResponse(BaseModel):
    deltas: List[Dict[str, Any]]


class ElementRequest(BaseModel):
    """Request model for describing a widget element."""
    rrule: Optional[str] = Field(None, description="Stored rule of the field delta, if any")
    values: Optional[Dict[str, Any]] = Field(None, description="Submitted values of the delta")
    state: Optional[WidgetState] = None
    reference: Optional[datetime] = None


class ElementResponse(BaseModel):
    repeat: Dict[str, Any]
    repeat_settings: Dict[str, Any]
    values: Dict[str, Any]


class ConfigureResponse(BaseModel):
    """Response for the Configure rebuild: new state plus the rebuilt element."""
    state: WidgetState
    element: ElementResponse


class OptionsResponse(BaseModel):
    repeat: Dict[str, str]
    interval_units: Dict[str, str]
    until: Dict[str, str]
    day_of_week: Dict[str, str]
    week_of_month: Dict[str, str]
    month_of_year: Dict[str, str]
