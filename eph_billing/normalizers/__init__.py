"""Entry normalization: one authoritative record per (date, subject)."""

from eph_billing.normalizers.entry_normalizer import (
    ROLE_PRECEDENCE,
    DateGroup,
    NormalizationResult,
    build_date_groups,
    group_entries,
    normalize,
    normalize_with_audit,
    rank_entry,
    select_entry,
)

__all__ = [
    "ROLE_PRECEDENCE",
    "DateGroup",
    "NormalizationResult",
    "build_date_groups",
    "group_entries",
    "normalize",
    "normalize_with_audit",
    "rank_entry",
    "select_entry",
]
