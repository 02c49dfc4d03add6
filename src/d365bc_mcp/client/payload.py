"""
Partial payload construction

Business Central treats every key present in a POST/PATCH body as
"set this field", including to an empty value. Payloads therefore contain
only the fields the caller explicitly provided.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Tuple, Union

from pydantic import BaseModel

ProvidedFields = Union[BaseModel, Mapping[str, Any], Iterable[Tuple[str, Any]]]


def _serialize_decimal(value: Decimal) -> Union[int, float]:
    """
    Convert a decimal to a JSON number without changing its value.

    Integral amounts become ints of any size. Other amounts become floats
    only when the float reads back as the same decimal.

    Raises:
        ValueError: If the value is not finite or has more significant
            digits than a JSON float keeps
    """
    if not value.is_finite():
        raise ValueError(f"Decimal value {value} is not a valid JSON number")
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) != value:
        raise ValueError(
            f"Decimal value {value} cannot be sent as a JSON number without losing precision"
        )
    return as_float


def _serialize(value: Any) -> Any:
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, Decimal):
        return _serialize_decimal(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return build_payload(value)
    if isinstance(value, Mapping):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


def _model_pairs(model: BaseModel) -> Iterable[Tuple[str, Any]]:
    """Yield (wire name, value) for fields explicitly set on the model"""
    fields = type(model).model_fields
    for name in model.model_fields_set:
        info = fields.get(name)
        wire_name = info.alias if info is not None and info.alias else name
        yield wire_name, getattr(model, name)


def build_payload(provided: ProvidedFields) -> Dict[str, Any]:
    """
    Build a JSON object from explicitly provided fields only.

    Args:
        provided: A pydantic model (explicitly set fields are tracked in
            ``model_fields_set``), a mapping, or (name, value) pairs. Every
            key of a mapping or pair list counts as provided.

    Returns:
        Dict with exactly the provided fields, values serialized per type
        (string, boolean, decimal as JSON number, dates as ISO strings)
    """
    if isinstance(provided, BaseModel):
        pairs: Iterable[Tuple[str, Any]] = _model_pairs(provided)
    elif isinstance(provided, Mapping):
        pairs = provided.items()
    else:
        pairs = provided

    return {name: _serialize(value) for name, value in pairs}
