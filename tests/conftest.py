"""Pytest fixtures and configuration for recurwidget tests."""

import pytest
from datetime import date, datetime
from fastapi.testclient import TestClient

from recurwidget.models.recurrence import EndCondition, Frequency, RecurrenceSettings
from recurwidget.models.widget import WidgetSettings


@pytest.fixture
def reference_date():
    """Fixed field start date used to expand rules."""
    return datetime(2026, 1, 5, 9, 0, 0)


@pytest.fixture
def sample_settings_base():
    """Base settings data for building RecurrenceSettings.

    Returns a dict with default attributes that can be overridden.
    """
    return {
        "frequency": Frequency.WEEKLY,
        "interval": 1,
        "end_condition": EndCondition.NEVER,
        "occurrence_count": None,
        "until_date": None,
        "weekdays": [],
        "week_ordinals": [],
        "months_of_year": [],
    }


@pytest.fixture
def monthly_last_friday(sample_settings_base):
    """Monthly on the last Friday, twelve times."""
    return RecurrenceSettings(**{
        **sample_settings_base,
        "frequency": Frequency.MONTHLY,
        "end_condition": EndCondition.COUNT,
        "occurrence_count": 12,
        "weekdays": ["FR"],
        "week_ordinals": [-1],
    })


@pytest.fixture
def weekly_until_year_end(sample_settings_base):
    """Every other Monday and Wednesday until the end of 2026."""
    return RecurrenceSettings(**{
        **sample_settings_base,
        "interval": 2,
        "end_condition": EndCondition.DATE,
        "until_date": date(2026, 12, 31),
        "weekdays": ["MO", "WE"],
    })


@pytest.fixture
def widget_settings():
    """Widget limited to weekly and monthly repeats."""
    return WidgetSettings(allowed_repeat_types=[Frequency.WEEKLY, Frequency.MONTHLY])


@pytest.fixture
def test_client(widget_settings):
    """Create a FastAPI test client with overridden widget settings."""
    from recurwidget.api.app import app
    from recurwidget.config import get_widget_settings

    app.dependency_overrides[get_widget_settings] = lambda: widget_settings

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()
