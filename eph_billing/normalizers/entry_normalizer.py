"""Entry normalizer for multi-authored timesheet submissions.

Operators, plant managers, admins and subcontractors may all submit or amend
a record for the same subject on the same day. This module selects exactly
one authoritative entry per (date, subject) key using a single ranking:

1. Subcontractor entries are never eligible; they are kept for reference.
2. Eligible entries rank by role: admin > plant manager > operator.
3. Within a role, an amended entry (``has_original_entry``,
   ``is_adjustment`` or ``adjusted_by``) outranks a plain submission.
4. Remaining ties are broken by the latest ``submitted_at`` when every tied
   entry carries a distinct timestamp; otherwise the key is ambiguous.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from eph_billing.errors import AmbiguousEntryError
from eph_billing.models.entry import AuthorRole, EffectiveEntry, EntryKey, RawEntry

logger = logging.getLogger(__name__)

ROLE_PRECEDENCE: Dict[AuthorRole, int] = {
    AuthorRole.OPERATOR: 1,
    AuthorRole.PLANT_MANAGER: 2,
    AuthorRole.ADMIN: 3,
}


@dataclass
class NormalizationResult:
    """Outcome of normalizing a set of raw entries.

    Attributes:
        effective: One EffectiveEntry per key with an eligible entry, in the
            order each key first appears in the input
        reference_only: Keys that only have subcontractor entries, mapped to
            those entries; displayed for reference, never billed
    """

    effective: List[EffectiveEntry] = field(default_factory=list)
    reference_only: Dict[EntryKey, Tuple[RawEntry, ...]] = field(default_factory=dict)

    @property
    def superseded(self) -> List[RawEntry]:
        """All eligible entries that lost to another entry for their key."""
        return [raw for eff in self.effective for raw in eff.superseded]


@dataclass
class DateGroup:
    """Parallel view of every author's entry for one subject and date.

    Used by report rendering, which shows all versions side by side while
    totals use only ``selected``.
    """

    date_key: EntryKey
    operator_entry: Optional[RawEntry] = None
    plant_manager_entry: Optional[RawEntry] = None
    admin_entry: Optional[RawEntry] = None
    subcontractor_entry: Optional[RawEntry] = None
    selected: Optional[RawEntry] = None


def rank_entry(entry: RawEntry) -> Optional[Tuple[int, int]]:
    """Rank an entry for selection as the effective entry.

    Args:
        entry: Entry to rank

    Returns:
        A sortable (role, amended) tuple, or None for entries that are never
        eligible (subcontractor entries)

    Example:
        >>> rank_entry(RawEntry(date="2024-03-04", subject_key="EX-01",
        ...                     author_role="admin"))
        (3, 0)
    """
    role_rank = ROLE_PRECEDENCE.get(entry.author_role)
    if role_rank is None:
        return None
    return (role_rank, 1 if entry.is_amended else 0)


def group_entries(
    raw_entries: Iterable[RawEntry],
) -> "OrderedDict[EntryKey, List[RawEntry]]":
    """Group entries by (date, subject_key), preserving first-seen order."""
    groups: "OrderedDict[EntryKey, List[RawEntry]]" = OrderedDict()
    for entry in raw_entries:
        groups.setdefault(entry.key, []).append(entry)
    return groups


def select_entry(key: EntryKey, candidates: List[RawEntry]) -> RawEntry:
    """Select the effective entry among the eligible entries of one key.

    Args:
        key: The (date, subject_key) being resolved
        candidates: Eligible (non-subcontractor) entries for the key

    Returns:
        The winning entry

    Raises:
        AmbiguousEntryError: If the group is empty or the top rank is tied
            without distinct submission timestamps
    """
    if not candidates:
        raise AmbiguousEntryError(
            f"No eligible entry for {key[1]} on {key[0].isoformat()}", key=key
        )

    best_rank = max(rank_entry(c) for c in candidates)
    top = [c for c in candidates if rank_entry(c) == best_rank]
    if len(top) == 1:
        return top[0]

    timestamps = [c.submitted_at for c in top]
    if all(ts is not None for ts in timestamps) and len(set(timestamps)) == len(top):
        winner = max(top, key=lambda c: c.submitted_at)
        logger.debug(
            f"Resolved tie for {key[1]} on {key[0]} by latest submission "
            f"({winner.submitted_at})"
        )
        return winner

    role = top[0].author_role.value
    kind = "amended" if best_rank[1] else "unamended"
    raise AmbiguousEntryError(
        f"{len(top)} {kind} {role} entries for {key[1]} on {key[0].isoformat()} "
        f"cannot be told apart",
        key=key,
        candidates=top,
        recovery_hint="Remove the duplicate submission or amend one of the entries",
    )


def normalize_with_audit(raw_entries: Iterable[RawEntry]) -> NormalizationResult:
    """Collapse raw submissions into one effective entry per (date, subject).

    Args:
        raw_entries: Raw entries for one tenant and reporting period

    Returns:
        NormalizationResult with effective entries and reference-only keys

    Raises:
        AmbiguousEntryError: If a key cannot be resolved uniquely
    """
    groups = group_entries(raw_entries)
    result = NormalizationResult()

    for key, entries in groups.items():
        eligible = [e for e in entries if rank_entry(e) is not None]
        reference = tuple(e for e in entries if rank_entry(e) is None)

        if not eligible:
            result.reference_only[key] = reference
            continue

        selected = select_entry(key, eligible)
        superseded = tuple(e for e in eligible if e is not selected)
        result.effective.append(
            EffectiveEntry(
                entry=selected, superseded=superseded, reference_entries=reference
            )
        )

    logger.info(
        f"Normalized {sum(len(v) for v in groups.values())} raw entries into "
        f"{len(result.effective)} effective entries "
        f"({len(result.superseded)} superseded, "
        f"{len(result.reference_only)} reference-only keys)"
    )
    return result


def normalize(raw_entries: Iterable[RawEntry]) -> List[EffectiveEntry]:
    """Return the effective entries of ``raw_entries``.

    See :func:`normalize_with_audit` for the superseded and reference-only
    records.
    """
    return normalize_with_audit(raw_entries).effective


def build_date_groups(raw_entries: Iterable[RawEntry]) -> List[DateGroup]:
    """Arrange entries per (date, subject) by author role for display.

    When one role submitted several entries for the same key the
    highest-ranked one is shown. The ``selected`` entry follows the same
    ranking as :func:`normalize`; it is None for subcontractor-only keys.

    Raises:
        AmbiguousEntryError: If a key cannot be resolved uniquely
    """
    date_groups = []
    for key, entries in group_entries(raw_entries).items():
        group = DateGroup(date_key=key)
        by_role: Dict[AuthorRole, List[RawEntry]] = {}
        for entry in entries:
            by_role.setdefault(entry.author_role, []).append(entry)

        for role, role_entries in by_role.items():
            shown = max(role_entries, key=lambda e: 1 if e.is_amended else 0)
            setattr(group, f"{role.value}_entry", shown)

        eligible = [e for e in entries if rank_entry(e) is not None]
        if eligible:
            group.selected = select_entry(key, eligible)
        date_groups.append(group)

    return date_groups
