"""FastAPI web application for recurwidget."""

import logging

from fastapi import Depends, FastAPI, HTTPException
from pydantic import ValidationError

from recurwidget.api.models import (
    ConfigureResponse,
    ElementRequest,
    ElementResponse,
    FormValuesRequest,
    FormValuesResponse,
    MassageRequest,
    MassageResponse,
    OptionsResponse,
    RuleResponse,
    RuleValuesRequest,
)
from recurwidget.config import VERSION, get_widget_settings
from recurwidget.models.widget import WidgetSettings
from recurwidget.recurrence.grammar import RuleParseError
from recurwidget.widget.form import (
    build_element,
    configure,
    massage_form_values,
    repeat_options,
    rule_from_values,
    values_from_rule,
)
from recurwidget.widget.options import (
    INTERVAL_UNIT_LABELS,
    MONTH_LABELS,
    UNTIL_OPTIONS,
    WEEK_OF_MONTH_OPTIONS,
    WEEKDAY_LABELS,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="recurwidget API",
    description="Recurring-date widget: form values to and from RFC 5545 recurrence rules",
    version=VERSION,
)


def _bad_values(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail=e.errors(include_url=False, include_context=False, include_input=False),
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/widget/options", response_model=OptionsResponse)
async def widget_options(widget_settings: WidgetSettings = Depends(get_widget_settings)):
    """Option lists for the widget controls, limited to the allowed repeat types."""
    return OptionsResponse(
        repeat=repeat_options(widget_settings.allowed_repeat_types),
        interval_units={f.value: label for f, label in INTERVAL_UNIT_LABELS.items()},
        until={op.value: label for op, label in UNTIL_OPTIONS.items()},
        day_of_week={d.value: label for d, label in WEEKDAY_LABELS.items()},
        week_of_month=dict(WEEK_OF_MONTH_OPTIONS),
        month_of_year={str(m): label for m, label in MONTH_LABELS.items()},
    )


@app.post("/widget/values", response_model=FormValuesResponse)
async def widget_values(request: RuleValuesRequest):
    """Seed form values from a stored rule."""
    try:
        return FormValuesResponse(values=values_from_rule(request.rrule, request.reference))
    except RuleParseError as e:
        logger.info(f"Rejected rule {request.rrule!r}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/widget/rule", response_model=RuleResponse)
async def widget_rule(request: FormValuesRequest):
    """Build the rule for one delta's submitted values."""
    if not request.values.get("repeat"):
        return RuleResponse(rrule=None)
    try:
        return RuleResponse(rrule=rule_from_values(request.values)["rrule"])
    except RuleParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        raise _bad_values(e)


@app.post("/widget/massage", response_model=MassageResponse)
async def widget_massage(request: MassageRequest):
    """Convert every submitted delta into field values."""
    try:
        return MassageResponse(deltas=massage_form_values(request.deltas))
    except RuleParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        raise _bad_values(e)


@app.post("/widget/element", response_model=ElementResponse)
async def widget_element(
    request: ElementRequest,
    widget_settings: WidgetSettings = Depends(get_widget_settings),
):
    """Describe one widget element for rendering."""
    try:
        element = build_element(
            request.rrule, request.values, widget_settings, request.state, request.reference
        )
    except RuleParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValidationError as e:
        raise _bad_values(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ElementResponse(**element)


@app.post("/widget/configure", response_model=ConfigureResponse)
async def widget_configure(
    request: FormValuesRequest,
    widget_settings: WidgetSettings = Depends(get_widget_settings),
):
    """Configure rebuild: remember the picked frequency and rebuild the element."""
    try:
        state = configure(request.values)
        element = build_element(None, request.values, widget_settings, state)
    except ValidationError as e:
        raise _bad_values(e)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ConfigureResponse(state=state, element=ElementResponse(**element))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
