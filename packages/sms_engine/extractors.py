"""
Field extractors.

Each extractor takes a message body and returns a value or None. None means
the field is absent or could not be read; extractors never raise on odd
input.
"""

import re
from decimal import Decimal
from typing import List, Optional, Tuple

from .merchant_extractor import MerchantExtractor
from .models import TransactionType
from .patterns import (
    ACCOUNT_RULES,
    AMOUNT_PATTERN,
    BALANCE_RULES,
    LOCATION_NOISE_PATTERNS,
    LOCATION_RULES,
    PAYMENT_ADDRESS_RULES,
    REFERENCE_RULES,
    DirectionMatch,
    find_direction_keyword,
    first_match,
    parse_decimal,
)


def extract_direction(body: Optional[str]) -> Optional[TransactionType]:
    """DEBIT/CREDIT from the earliest keyword, UNKNOWN for neutral wording."""
    found = find_direction_keyword(body or "")
    return found.type if found else None


def _balance_spans(body: str) -> List[Tuple[int, int]]:
    spans = []
    for balance_rule in BALANCE_RULES:
        for match in balance_rule.regex.finditer(body):
            spans.append(match.span(1))
    return spans


def _distance(span: Tuple[int, int], keyword: DirectionMatch) -> int:
    start, end = span
    if end <= keyword.start:
        return keyword.start - end
    if start >= keyword.end:
        return start - keyword.end
    return 0


def extract_amount(body: Optional[str]) -> Optional[Decimal]:
    """Transaction amount, skipping balance figures.

    With several candidates the one closest to the direction keyword wins;
    on equal distance the earlier one does.
    """
    if not body:
        return None

    balance_spans = _balance_spans(body)
    candidates = []
    for match in AMOUNT_PATTERN.finditer(body):
        if match.span(1) in balance_spans:
            continue
        value = parse_decimal(match.group(1))
        if value is not None:
            candidates.append((match.span(1), value))

    if not candidates:
        return None

    keyword = find_direction_keyword(body)
    if keyword is None:
        return candidates[0][1]

    # min() keeps the first of equally distant candidates
    _, value = min(candidates, key=lambda candidate: _distance(candidate[0], keyword))
    return value


def extract_upi_id(body: Optional[str]) -> Optional[str]:
    """Payment address: labelled, then by payee context, then anywhere."""
    return first_match(PAYMENT_ADDRESS_RULES, body or "")


_merchant_extractor = MerchantExtractor()


def extract_merchant(body: Optional[str]) -> Optional[str]:
    """Counterparty named in the text, else derived from the payment address."""
    return _merchant_extractor.extract(body)


def extract_reference(body: Optional[str]) -> Optional[str]:
    return first_match(REFERENCE_RULES, body or "")


def extract_account_number(body: Optional[str]) -> Optional[str]:
    """Last 4-6 digits of the account or card."""
    return first_match(ACCOUNT_RULES, body or "")


def extract_balance(body: Optional[str]) -> Optional[Decimal]:
    return first_match(BALANCE_RULES, body or "")


def _clean_location(raw: str) -> Optional[str]:
    location = re.sub(r"\s+", " ", raw).strip()
    changed = True
    while changed and location:
        changed = False
        for noise in LOCATION_NOISE_PATTERNS:
            cleaned = noise.sub("", location).strip()
            if cleaned != location:
                location, changed = cleaned, True
    if not re.search(r"[A-Za-z]", location):
        return None
    return " ".join(word[:1].upper() + word[1:].lower() for word in location.split(" "))


def extract_location(body: Optional[str]) -> Optional[str]:
    """ATM, branch or city named in a generic bank message."""
    if not body:
        return None
    for location_rule in LOCATION_RULES:
        for match in location_rule.regex.finditer(body):
            location = _clean_location(match.group(1))
            if location:
                return location
    return None
