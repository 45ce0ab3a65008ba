from datetime import date, datetime
import re
from typing import Any, Union, get_args, get_origin
from uuid import UUID
from pydantic import BaseModel, model_validator

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively convert empty strings to None and strip invisible chars."""

    if isinstance(value, BaseModel):
        data = value.model_dump()
        cleaned = deep_clean(data)
        return type(value)(**cleaned)

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    if isinstance(value, UUID):
        return value

    return value


def parse_date(value: Any):
    """Convert ISO date / datetime strings to a date. Raises ValueError when invalid."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        raise ValueError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _is_date_annotation(annotation) -> bool:
    origin = get_origin(annotation)
    args = get_args(annotation)
    return (
        annotation in (date, datetime)
        or (origin is Union and any(a in (date, datetime) for a in args))
    )


class EmptyStringModel(BaseModel):
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    # STEP 1: Pre-clean input
    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if isinstance(values, dict):
            return deep_clean(values)
        return values

    # STEP 2: Date strings (including full ISO timestamps) become dates
    @model_validator(mode="before")
    @classmethod
    def fix_dates(cls, values):
        if not isinstance(values, dict):
            return values

        for field_name, field in cls.model_fields.items():
            if not _is_date_annotation(field.annotation):
                continue
            for key in (field_name, field.alias):
                if key and key in values:
                    values[key] = parse_date(values[key])

        return values
