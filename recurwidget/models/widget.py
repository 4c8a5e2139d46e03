"""Widget configuration and per-request state models."""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from recurwidget.models.recurrence import Frequency


class WidgetSettings(BaseModel):
    """Field-level widget configuration."""

    allowed_repeat_types: List[Frequency] = Field(
        default_factory=lambda: list(Frequency),
        description="Frequencies offered in the Repeat select",
    )


class WidgetState(BaseModel):
    """Request-scoped widget state.

    Remembers which frequency the editor picked so a partial rebuild of the
    settings fieldset (the "Configure" round-trip) renders the right controls.
    Passed explicitly through the handler chain; nothing is kept between requests.

    repeat_setting is None until Configure runs; "" means the editor chose no repeat.
    """

    repeat_setting: Optional[Union[Frequency, Literal[""]]] = None
