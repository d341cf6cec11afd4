"""
enps_survey.services.answers

Survey answer normalisation and the edit-window rule.

Responsibilities:
- Turn a sparse update (only the keys the caller sent) into column writes.
- Trim text answers and store blank text as NULL.
- Decide whether a survey is still editable by its author.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from enps_survey.db.models import TEXT_FIELDS, AnswerField, ContributionValue, Survey


def normalize_answers(updates: Mapping[str, Any]) -> dict[AnswerField, Any]:
    """
    Keys absent from `updates` are left out (unchanged). Explicit None clears a field;
    a blank or whitespace-only string clears a text field.
    """

    normalized: dict[AnswerField, Any] = {}
    for key, value in updates.items():
        field = AnswerField(key)
        if field in TEXT_FIELDS and isinstance(value, str):
            value = value.strip() or None
        elif field is AnswerField.contribution_valued and value is not None:
            value = ContributionValue(value)
        normalized[field] = value
    return normalized


def apply_answers(survey: Survey, answers: Mapping[AnswerField, Any]) -> bool:
    changed = False
    for field, value in answers.items():
        changed = survey.set_answer(field, value) or changed
    return changed


def can_edit(created_at: datetime, *, now: datetime, window: timedelta) -> bool:
    # Measured from creation only; updates never extend the window.
    return now - created_at <= window
