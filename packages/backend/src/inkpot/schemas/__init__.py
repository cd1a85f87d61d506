"""Pydantic schemas and the pure validation functions built on them.

Validation is transport-independent: validate() takes a plain dict and
returns a typed model or raises InvalidInput listing every field error.
"""

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from inkpot.errors import InvalidInput

M = TypeVar("M", bound=BaseModel)


def field_errors(exc) -> list[dict]:
    """Flatten a ValidationError (or FastAPI RequestValidationError) into
    [{"field", "message"}]."""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"]) or "body"
        errors.append({"field": field, "message": err["msg"]})
    return errors


def validate(model: type[M], data: dict, message: str = "Invalid input.") -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidInput(field_errors(e), message)
