from __future__ import annotations

from datetime import date, datetime

from django.utils import timezone
from django.utils.dateparse import parse_date

from payments.exceptions import ValidationError


def _as_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localdate(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            parsed = parse_date(value.strip())
        except ValueError:
            parsed = None
        if parsed is not None:
            return parsed
    raise ValidationError(f"Invalid date: {value!r}. Use YYYY-MM-DD.")


def validate_date_range(start, end, *, today: date | None = None) -> tuple[date, date]:
    """
    Check a requested stay and return it as a `(start, end)` pair of dates.

    The end must fall strictly after the start, and neither may lie before
    `today` (the local date at submission time by default).
    """

    start_date = _as_date(start)
    end_date = _as_date(end)
    if start_date is None or end_date is None:
        raise ValidationError("Both a start and an end date are required.")

    today = today or timezone.localdate()
    if start_date < today or end_date < today:
        raise ValidationError("Dates cannot be in the past.")
    if end_date <= start_date:
        raise ValidationError("End date must be after the start date.")
    return start_date, end_date
