# strivio/models/validation.py
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

FormT = TypeVar("FormT", bound=BaseModel)

_REQUIRED_ERRORS = {"missing", "string_too_short", "string_type"}


def _message(schema: Type[BaseModel], field: str, error: Mapping[str, Any]) -> str:
    required = getattr(schema, "required_messages", {})
    invalid = getattr(schema, "invalid_messages", {})
    if error["type"] in _REQUIRED_ERRORS and field in required:
        return required[field]
    if field in invalid:
        return invalid[field]
    return str(error["msg"]).removeprefix("Value error, ")


def validate_form(schema: Type[FormT], data: Mapping[str, Any]) -> Tuple[Optional[FormT], Dict[str, str]]:
    """Validate raw form input. Returns (form, {}) or (None, {field: message}).

    Only the first error of each field is kept so the page shows exactly one
    message per failing field.
    """
    try:
        return schema.model_validate(dict(data)), {}
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "__all__"
            if field not in errors:
                errors[field] = _message(schema, field, error)
        return None, errors
