"""
Batch deduplication of parsed transactions.

Banks and payment apps often report one payment several times: the app
confirms it, the bank debits it, a reminder repeats it. Records sharing a
reference id are one transaction. Records without one are matched on
amount, direction, account and balance when they arrive within a short
window of each other.

Matching is transitive: a run of records each within the window of the
previous one collapses to its earliest record, even when the run as a
whole spans longer than the window. Two genuinely separate identical
payments made inside the window are merged as well; the window is a
setting because narrowing it trades that for missed duplicates.
"""

import hashlib
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

import structlog

from .core.config import DEFAULT_DEDUP_WINDOW_SECONDS
from .models import ParsedTransaction

logger = structlog.get_logger()


def _newest_first(record: ParsedTransaction) -> Tuple[int, int]:
    return (record.date, record.sms_id)


def _match_key(record: ParsedTransaction) -> tuple:
    # Equal values, or both absent, compare equal
    return (record.amount, record.type, record.account_number, record.balance_after)


def _collapse_referenced(records: Iterable[ParsedTransaction]) -> List[ParsedTransaction]:
    kept: Dict[str, ParsedTransaction] = {}
    for record in records:
        current = kept.get(record.reference_number)
        if current is None or _newest_first(record) > _newest_first(current):
            kept[record.reference_number] = record
    return list(kept.values())


def _collapse_near_duplicates(
    records: Iterable[ParsedTransaction], window_millis: int
) -> List[ParsedTransaction]:
    groups: Dict[tuple, List[ParsedTransaction]] = defaultdict(list)
    for record in records:
        groups[_match_key(record)].append(record)

    kept = []
    for group in groups.values():
        group.sort(key=_newest_first)
        previous = None
        for record in group:
            # A gap wider than the window starts a new chain
            if previous is None or record.date - previous.date > window_millis:
                kept.append(record)
            previous = record
    return kept


def dedupe(
    records: Iterable[ParsedTransaction], window_seconds: Optional[int] = None
) -> List[ParsedTransaction]:
    """Collapse duplicate records.

    Args:
        records: Parsed transactions in any order.
        window_seconds: Max gap between matching reference-less records.
                        Defaults to DEFAULT_DEDUP_WINDOW_SECONDS.

    Returns:
        Surviving records, newest first, ties by sms_id descending.
    """
    if window_seconds is None:
        window_seconds = DEFAULT_DEDUP_WINDOW_SECONDS

    records = list(records)
    referenced = [r for r in records if r.reference_number]
    unreferenced = [r for r in records if not r.reference_number]

    survivors = _collapse_referenced(referenced)
    survivors += _collapse_near_duplicates(unreferenced, window_seconds * 1000)
    survivors.sort(key=_newest_first, reverse=True)

    if len(survivors) < len(records):
        logger.debug(
            "batch_deduplicated",
            received=len(records),
            kept=len(survivors),
            dropped=len(records) - len(survivors),
        )
    return survivors


def transaction_fingerprint(record: ParsedTransaction) -> str:
    """
    Stable SHA256 key for cross-batch uniqueness checks.
    Referenced: SHA256(REF|{reference}), matching dedupe's exact grouping
    Otherwise:  SHA256({date_ms}|{amount}|{type}|{account}|{balance})
    """
    if record.reference_number:
        raw_string = f"REF|{record.reference_number}"
    else:
        amount = f"{record.amount:.2f}"
        balance = f"{record.balance_after:.2f}" if record.balance_after is not None else ""
        raw_string = (
            f"{record.date}|{amount}|{record.type.value}|"
            f"{record.account_number or ''}|{balance}"
        )
    return hashlib.sha256(raw_string.encode("utf-8")).hexdigest()
