"""
MailChimp Sync Backend — Payload Validation
=============================================

What:  Pure functions that evaluate a ruleset against a payload and merge
       request bodies onto entities through an allow-list.
Why:   Validation must not depend on FastAPI: services call these directly,
       and the result is a plain `{field: [reason, ...]}` mapping.
How:   Rulesets are Pydantic models (app.schemas.*Rules). A failed
       model_validate() is flattened into dotted field names, e.g.
       ("location", "latitude") → "location.latitude".
"""

from typing import Any, Dict, Iterable, List, Mapping, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.schemas.mailchimp_list import ListRules
from app.schemas.member import MemberRules

UNKNOWN_FIELD = "Unknown field."
READ_ONLY_FIELD = "Field cannot be changed."

_TRUTHY = {"1", "true", "on", "yes"}


def collect_errors(rules: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, List[str]]:
    """
    Evaluate `rules` against `data`.

    Returns:
        Empty dict when the payload is valid, otherwise every failing field
        mapped to its reasons (in the order Pydantic reports them).
    """
    try:
        rules.model_validate(dict(data))
    except PydanticValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__root__"
            errors.setdefault(field, []).append(error["msg"])
        return errors
    return {}


def validate_member(data: Mapping[str, Any]) -> Dict[str, List[str]]:
    return collect_errors(MemberRules, data)


def validate_list(data: Mapping[str, Any]) -> Dict[str, List[str]]:
    return collect_errors(ListRules, data)


def coerce_bool(value: Any) -> bool:
    """
    Boolean interpretation of loosely typed flags.

    "1", "true", "on", "yes" (any case) and True/1 are true; every other
    value is false.
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def normalize_flags(data: Dict[str, Any], flags: Iterable[str]) -> Dict[str, Any]:
    """Coerce each present, non-empty flag in `data` to a bool, in place."""
    for flag in flags:
        value = data.get(flag)
        if value is not None and value != "":
            data[flag] = coerce_bool(value)
    return data


def check_allowed_fields(
    data: Mapping[str, Any],
    allowed: Iterable[str],
    read_only: Iterable[str] = (),
) -> Dict[str, List[str]]:
    """
    Reasons for every key of `data` that may not be assigned.

    Keys listed in `read_only` are reported as unchangeable; anything else
    outside `allowed` as unknown.
    """
    allowed = set(allowed)
    read_only = set(read_only)
    errors: Dict[str, List[str]] = {}
    for key in data:
        if key in read_only:
            errors[key] = [READ_ONLY_FIELD]
        elif key not in allowed:
            errors[key] = [UNKNOWN_FIELD]
    return errors
