"""
Decision Input Validator.

Runs the pydantic contract over a raw payload and, on failure, flattens the
errors into a field-level map:

    {"field_errors": {"deaths": ["..."]}, "form_errors": ["..."]}

form_errors holds problems not tied to a single field (e.g. payload is not
an object).
"""

from typing import Any, Optional

import structlog
from pydantic import ValidationError

from launchsense.schemas.telemetry import DecisionInput

logger = structlog.get_logger(__name__)


def flatten_errors(exc: ValidationError) -> dict[str, Any]:
    field_errors: dict[str, list[str]] = {}
    form_errors: list[str] = []

    for err in exc.errors():
        loc = err.get("loc") or ()
        if not loc:
            form_errors.append(err["msg"])
            continue
        key = ".".join(str(part) for part in loc)
        field_errors.setdefault(key, []).append(err["msg"])

    return {"field_errors": field_errors, "form_errors": form_errors}


def validate_decision_input(raw: Any) -> tuple[Optional[DecisionInput], dict[str, Any]]:
    """
    Validate a raw payload.

    Returns (DecisionInput, {}) on success, (None, details) on failure.
    """
    if isinstance(raw, DecisionInput):
        return raw, {}

    if not isinstance(raw, dict):
        return None, {
            "field_errors": {},
            "form_errors": [f"Expected an object, got {type(raw).__name__}"],
        }

    try:
        return DecisionInput.model_validate(raw), {}
    except ValidationError as exc:
        details = flatten_errors(exc)
        logger.info(
            "decision_input_rejected",
            fields=sorted(details["field_errors"].keys()),
        )
        return None, details
