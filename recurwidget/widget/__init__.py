"""Recurring-date widget form layer."""

from recurwidget.widget.form import (
    build_element,
    configure,
    default_values,
    element_values,
    massage_form_values,
    merge_deep,
    repeat_options,
    rule_from_values,
    settings_fieldset,
    settings_from_values,
    values_from_rule,
    values_from_settings,
)

__all__ = [
    "build_element",
    "configure",
    "default_values",
    "element_values",
    "massage_form_values",
    "merge_deep",
    "repeat_options",
    "rule_from_values",
    "settings_fieldset",
    "settings_from_values",
    "values_from_rule",
    "values_from_settings",
]
