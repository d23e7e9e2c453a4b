"""
# Validation Service

Schema-driven validation of request payloads.

Handlers call these helpers before touching the database and turn an invalid
result into a `validation_error` response. Failures never raise; they come
back as a `ValidationResult` with a human-readable message listing every
problem as `"<field path>" <reason>`.

## Usage Example

```python
result = validate_params(body, BlogCreateRequest)
if not result.is_valid:
    return validation_error(message=f"Invalid values in parameters, {result.message}")
cleaned = result.value
```
"""

from typing import Any, Dict, Iterable, Optional, Type

from pydantic import BaseModel, ValidationError

from admin_backend.managers.logging_manager import get_logger

logger = get_logger(prefix="[Validation]")

FILTER_QUERY_KEYS = ("query", "where")
IDENTIFIER_KEYS = frozenset({"_id", "id"})


class ValidationResult(BaseModel):
    """
    Outcome of a validation call.

    Attributes:
        is_valid: Whether the payload matched the schema.
        message: Joined error messages, empty when valid.
        value: Validated payload (aliases applied, unknown keys kept), `None` when invalid.
    """

    is_valid: bool
    message: str = ""
    value: Optional[Dict[str, Any]] = None


def format_validation_errors(error: ValidationError) -> str:
    """Render pydantic errors as `"a.b" reason` fragments joined by `, `."""
    parts = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "value"
        parts.append(f'"{path}" {item["msg"]}')
    return ", ".join(parts)


def validate_params(payload: Any, schema: Type[BaseModel]) -> ValidationResult:
    """
    Validate a request body against a pydantic schema.

    Args:
        payload: Decoded JSON body.
        schema: Pydantic model describing the accepted shape.

    Returns:
        ValidationResult: `value` holds the dumped model including extra keys.
    """
    if not isinstance(payload, dict):
        return ValidationResult(is_valid=False, message='"value" must be of type object')

    try:
        model = schema.model_validate(payload)
    except ValidationError as e:
        message = format_validation_errors(e)
        logger.debug("Payload rejected by %s: %s", schema.__name__, message)
        return ValidationResult(is_valid=False, message=message)

    return ValidationResult(is_valid=True, value=model.model_dump(by_alias=True, exclude_unset=True))


def _unknown_filter_keys(filter_doc: Dict[str, Any], model_fields: Iterable[str]) -> list:
    allowed = set(model_fields) | IDENTIFIER_KEYS
    return [key for key in filter_doc if key not in allowed and not key.startswith("$")]


def validate_filter(
    payload: Any,
    filter_schema: Type[BaseModel],
    model_fields: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """
    Validate a list/count envelope and, optionally, the fields it filters on.

    When `model_fields` is given, every top-level key of `query` and `where`
    must be a model field, an identifier key or a `$` operator.

    Args:
        payload: Decoded JSON body, e.g. `{"query": {...}, "options": {...}}`.
        filter_schema: Pydantic model for the envelope.
        model_fields: Field names of the stored document.

    Returns:
        ValidationResult: `value` equals the submitted payload when valid.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return ValidationResult(is_valid=False, message='"value" must be of type object')

    try:
        filter_schema.model_validate(payload)
    except ValidationError as e:
        return ValidationResult(is_valid=False, message=format_validation_errors(e))

    if model_fields is not None:
        fields = frozenset(model_fields)
        for key in FILTER_QUERY_KEYS:
            filter_doc = payload.get(key)
            if not isinstance(filter_doc, dict):
                continue
            unknown = _unknown_filter_keys(filter_doc, fields)
            if unknown:
                message = ", ".join(f'"{key}.{name}" is not allowed' for name in unknown)
                return ValidationResult(is_valid=False, message=message)

    return ValidationResult(is_valid=True, value=payload)
