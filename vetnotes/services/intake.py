import logging
from typing import Any

from pydantic import ValidationError as SchemaError

from vetnotes.errors import ValidationError
from vetnotes.models.intake import INTAKE_MODELS, Intake

logger = logging.getLogger(__name__)


def _first_error(exc: SchemaError) -> ValidationError:
    err = exc.errors()[0]
    field = ".".join(str(part) for part in err.get("loc", ())) or "body"
    return ValidationError(field, err.get("msg", "invalid value"))


def normalize(mode: str | None, raw_body: Any) -> Intake:
    """Validate a request body for ``mode`` and fill every missing field with its placeholder.

    Absent optional fields never fail. Only an unknown mode, a body that is not
    an object, or a field of the wrong shape (e.g. a list where text is
    expected) raises :class:`ValidationError`.
    """
    key = str(mode or "").strip().lower()
    model = INTAKE_MODELS.get(key)
    if model is None:
        raise ValidationError("mode", f"must be one of {', '.join(INTAKE_MODELS)}")

    if raw_body is None:
        raw_body = {}
    if not isinstance(raw_body, dict):
        raise ValidationError("body", "must be a JSON object")

    data = {k: v for k, v in raw_body.items() if k != "mode"}
    try:
        intake = model.model_validate(data)
    except SchemaError as exc:
        raise _first_error(exc) from None

    logger.debug("Normalized %s intake (%d raw fields)", key, len(data))
    return intake
