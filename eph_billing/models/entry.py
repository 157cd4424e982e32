"""Timesheet entry models for the billing engine.

This module defines the RawEntry model, which represents one submitted
timesheet record for a subject (operator or asset) on a calendar day, and
the EffectiveEntry model, which is the single record selected to represent
a (date, subject) pair for billing.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import ConfigDict, Field, field_validator

from eph_billing.models.base import BaseDataModel, to_decimal

EntryKey = Tuple[dt.date, str]


class AuthorRole(str, Enum):
    """Role of the person who submitted or amended an entry."""

    OPERATOR = "operator"
    PLANT_MANAGER = "plant_manager"
    ADMIN = "admin"
    SUBCONTRACTOR = "subcontractor"

    @classmethod
    def parse(cls, value: Any) -> "AuthorRole":
        """Parse a role from an enum value or a display label.

        Example:
            >>> AuthorRole.parse("Plant Manager")
            <AuthorRole.PLANT_MANAGER: 'plant_manager'>
        """
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(role.value for role in cls)
            raise ValueError(f"Unknown author role '{value}'. Must be one of: {valid}")


class RawEntry(BaseDataModel):
    """Represents one submitted timesheet record.

    A RawEntry is never mutated: a new submission or amendment for the same
    (date, subject) is a new RawEntry, and the normalizer decides which one
    counts.

    Attributes:
        date: Calendar day of the work
        subject_key: Operator name or asset id (the dedup grouping key)
        author_role: Role of the submitter
        start_time: Time-in as ``HH:MM`` (optional)
        end_time: Time-out as ``HH:MM`` (optional)
        total_hours: Precomputed worked hours, used when times are absent
        is_breakdown: Asset was broken down
        is_rain_day: Rain day marked by the operator
        is_inclement_weather: Inclement weather marked by the operator
        is_strike_day: Strike day (informational only)
        is_public_holiday: Day marked as a public holiday
        is_adjustment: Record is an adjustment of an earlier one
        has_original_entry: Record replaces an original entry
        adjusted_by: Who amended the record
        submitted_at: Submission timestamp, used only to break ties

    Example:
        >>> entry = RawEntry.model_validate({
        ...     "date": "2024-03-04",
        ...     "subjectKey": "EX-01",
        ...     "authorRole": "Operator",
        ...     "startTime": "07:00",
        ...     "endTime": "16:00",
        ... })
        >>> entry.author_role
        <AuthorRole.OPERATOR: 'operator'>
        >>> entry.key
        (datetime.date(2024, 3, 4), 'EX-01')
    """

    # Stored documents carry many display fields the engine does not use
    model_config = ConfigDict(extra="ignore")

    date: dt.date = Field(..., description="Calendar day of the work")
    subject_key: str = Field(..., min_length=1, description="Operator or asset id")
    author_role: AuthorRole = Field(..., description="Role of the submitter")
    start_time: Optional[str] = Field(None, description="Time-in (HH:MM)")
    end_time: Optional[str] = Field(None, description="Time-out (HH:MM)")
    total_hours: Optional[Decimal] = Field(
        None, allow_inf_nan=True, description="Precomputed worked hours"
    )

    is_breakdown: bool = False
    is_rain_day: bool = False
    is_inclement_weather: bool = False
    is_strike_day: bool = False
    is_public_holiday: bool = False

    is_adjustment: bool = False
    has_original_entry: bool = False
    adjusted_by: Optional[str] = None

    id: Optional[str] = None
    operator_name: Optional[str] = None
    asset_id: Optional[str] = None
    asset_type: Optional[str] = None
    notes: Optional[str] = None
    submitted_at: Optional[dt.datetime] = None

    @field_validator("subject_key")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        """Validate that string fields are not empty or whitespace only.

        Raises:
            ValueError: If the value is empty or whitespace only
        """
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return v.strip()

    @field_validator("author_role", mode="before")
    @classmethod
    def parse_author_role(cls, v: Any) -> AuthorRole:
        return AuthorRole.parse(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def time_to_string(cls, v: Any) -> Optional[str]:
        """Accept ``datetime.time`` values and blank strings.

        Times are kept as text; parsing happens in the calculator so an
        unparseable value surfaces as an InvalidTimeRangeError there.
        """
        if v is None:
            return None
        if isinstance(v, dt.time):
            return v.strftime("%H:%M:%S")
        text = str(v).strip()
        return text or None

    @field_validator("adjusted_by", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("total_hours", mode="before")
    @classmethod
    def convert_to_decimal(cls, v: Any) -> Optional[Decimal]:
        return to_decimal(v)

    @property
    def key(self) -> EntryKey:
        """Composite grouping key (date, subject_key)."""
        return (self.date, self.subject_key)

    @property
    def is_amended(self) -> bool:
        """True for an edited or amended record."""
        return self.has_original_entry or self.is_adjustment or bool(self.adjusted_by)

    @property
    def has_time_range(self) -> bool:
        return self.start_time is not None or self.end_time is not None


class EffectiveEntry(BaseDataModel):
    """The single record selected to represent a (date, subject) pair.

    Attributes:
        entry: The selected RawEntry
        superseded: Other eligible entries for the same key (audit only)
        reference_entries: Subcontractor entries for the same key, shown
            alongside for reference and never billed
    """

    entry: RawEntry
    superseded: Tuple[RawEntry, ...] = ()
    reference_entries: Tuple[RawEntry, ...] = ()

    @property
    def key(self) -> EntryKey:
        return self.entry.key

    @property
    def date(self) -> dt.date:
        return self.entry.date

    @property
    def subject_key(self) -> str:
        return self.entry.subject_key
