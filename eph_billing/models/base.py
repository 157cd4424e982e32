"""Base model for all data models in the billing engine.

This module provides a base Pydantic model with common configuration
and helper methods for serialization/deserialization.
"""

from decimal import Decimal
from fractions import Fraction
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - camelCase aliases, so stored documents (``subjectKey``, ``isRainDay``)
      validate directly while Python code uses snake_case names
    - Immutability (frozen models) so one instance can be shared between
      independent calculation passes
    - Arbitrary types support for dates, times, decimals

    Example:
        >>> class Asset(BaseDataModel):
        ...     asset_id: str
        ...     plant_number: int
        >>> asset = Asset.model_validate({"assetId": "EX-01", "plantNumber": 7})
        >>> asset.asset_id
        'EX-01'
        >>> asset.model_dump(by_alias=True)
        {'assetId': 'EX-01', 'plantNumber': 7}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date, time
        arbitrary_types_allowed=True,
        # Accept camelCase document keys as well as field names
        alias_generator=to_camel,
        populate_by_name=True,
        # Use strict type checking
        strict=False,
        # Unknown fields are rejected unless a model opts out
        extra="forbid",
        # Frozen models are immutable after creation
        frozen=True,
    )


def to_decimal(v: Any) -> Optional[Decimal]:
    """Convert numeric values to Decimal for precision.

    Args:
        v: The value to convert (None passes through)

    Returns:
        The value as a Decimal, or None

    Raises:
        ValueError: If the value cannot be converted to Decimal
    """
    if v is None or isinstance(v, Decimal):
        return v
    if isinstance(v, bool):
        raise ValueError(f"Cannot convert boolean {v} to Decimal")
    try:
        return Decimal(str(v).strip())
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {v} to Decimal: {e}")


def fraction_to_decimal(value: Fraction) -> Decimal:
    """Convert an exact fraction to a Decimal.

    Terminating values (whole, half and quarter hours, currency amounts)
    convert exactly; others are rounded once to the Decimal context precision.

    Example:
        >>> fraction_to_decimal(Fraction(29, 4))
        Decimal('7.25')
    """
    return Decimal(value.numerator) / Decimal(value.denominator)
