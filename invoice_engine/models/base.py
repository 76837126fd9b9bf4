"""Base model for all data models in the invoice engine.

This module provides a base Pydantic model with common configuration
and helper methods for serialization/deserialization.
"""

from decimal import Decimal
from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - camelCase aliases so documents exported by the document store
      (``projectId``, ``hourlyRate``, ...) validate directly
    - Immutability (frozen models), since the engine works on snapshots
    - Ignoring unknown keys such as stored ``billableAmount`` values,
      which are always recomputed

    Example:
        >>> class Rate(BaseDataModel):
        ...     hourly_rate: Decimal
        >>> Rate.model_validate({"hourlyRate": "150"}).hourly_rate
        Decimal('150')
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, time
        arbitrary_types_allowed=True,
        alias_generator=to_camel,
        populate_by_name=True,
        strict=False,
        extra="ignore",
        frozen=True,
    )


def to_decimal(v: Union[str, int, float, Decimal]) -> Decimal:
    """Convert a numeric value to Decimal for precision.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal('0.1')``
    rather than its binary expansion.

    Args:
        v: The value to convert

    Returns:
        The value as a Decimal

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert {v} to Decimal")
    try:
        return Decimal(str(v))
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {v} to Decimal: {e}")
