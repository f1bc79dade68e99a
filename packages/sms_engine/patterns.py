"""
Pattern library for bank and payment-app SMS.

Every field is described by an ordered tuple of ``Rule`` objects. Rules are
tried top to bottom and the first one whose transform yields a value wins,
so the tuple order is the tie-break between competing phrasings. All
expressions are compiled once at import and never mutated afterwards.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, NamedTuple, Optional, Pattern, Sequence, Tuple

from .models import TransactionType


class Rule(NamedTuple):
    """A named regex plus the transform applied to its match."""

    name: str
    regex: Pattern
    transform: Callable[[re.Match], Optional[Any]]


def _group1(match: re.Match) -> Optional[str]:
    value = match.group(1)
    return value.strip() if value else None


def rule(name: str, pattern: str, transform=_group1, flags: int = re.IGNORECASE) -> Rule:
    return Rule(name, re.compile(pattern, flags), transform)


def match_rule(rules: Sequence[Rule], text: str) -> Optional[Tuple[str, Any]]:
    """Return ``(rule_name, value)`` for the first rule producing a value."""
    if not text:
        return None
    for candidate in rules:
        for match in candidate.regex.finditer(text):
            value = candidate.transform(match)
            if value is not None:
                return candidate.name, value
    return None


def first_match(rules: Sequence[Rule], text: str) -> Optional[Any]:
    """Value of the first matching rule, or None."""
    found = match_rule(rules, text)
    return found[1] if found else None


def parse_decimal(raw: Optional[str]) -> Optional[Decimal]:
    """Parse '1,25,000.50' style numbers; None when not a number."""
    if not raw:
        return None
    try:
        value = Decimal(raw.replace(",", "").strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return value


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

CURRENCY = r"(?<![A-Za-z])(?:Rs\.?|INR|₹)"
NUMBER = r"(\d+(?:,\d+)*(?:\.\d{1,2})?)"

AMOUNT_PATTERN = re.compile(CURRENCY + r"\s*" + NUMBER, re.IGNORECASE)

# Ordered most specific first
BALANCE_RULES: Tuple[Rule, ...] = (
    rule(
        "available_balance",
        r"\b(?:Avl\.?|Available|Avail\.?)\s*Bal(?:ance)?\b\.?[\s:-]*(?:is\s*)?"
        + CURRENCY + r"\s*" + NUMBER,
        lambda m: parse_decimal(m.group(1)),
    ),
    rule(
        "balance",
        r"\bBalance\b[\s:-]*(?:is\s*)?" + CURRENCY + r"\s*" + NUMBER,
        lambda m: parse_decimal(m.group(1)),
    ),
    rule(
        "bal",
        r"\bBal\b\.?[\s:-]*" + CURRENCY + r"\s*" + NUMBER,
        lambda m: parse_decimal(m.group(1)),
    ),
)


# ---------------------------------------------------------------------------
# Direction keywords
# ---------------------------------------------------------------------------

# Labels such as "Txn ID" or "UPI Transaction No" are references, not verbs
_NOT_A_LABEL = r"(?!\s*(?:ID|No\b|Number|Ref))"

DEBIT_KEYWORDS = re.compile(
    r"\b(?:debited|debit(?!\s*(?:card|limit))|spent|paid|purchased?|withdrawn|"
    r"withdrawal|sent|transferred|payment\s+(?:of|to|made|done|successful)|"
    r"used\s+for|UPI[\s-](?:txn|transaction|transfer|debit)" + _NOT_A_LABEL + r")\b",
    re.IGNORECASE,
)

CREDIT_KEYWORDS = re.compile(
    r"\b(?:credited|credit(?!\s*(?:card|limit|score))|received|deposited|deposit|"
    r"refund(?:ed)?|cashback|reversed|reversal)\b",
    re.IGNORECASE,
)

# Transaction words that carry no direction on their own
NEUTRAL_KEYWORDS = re.compile(
    r"\b(?:transaction|txn)\b" + _NOT_A_LABEL, re.IGNORECASE
)

# Class order breaks ties between keywords starting at the same offset
DIRECTION_CLASSES: Tuple[Tuple[TransactionType, Pattern], ...] = (
    (TransactionType.DEBIT, DEBIT_KEYWORDS),
    (TransactionType.CREDIT, CREDIT_KEYWORDS),
)

COMPLETED_TRANSACTION_VERBS = re.compile(
    r"\b(?:debited|credited|withdrawn|paid|sent|received|transferred|spent|"
    r"refunded|deposited)\b",
    re.IGNORECASE,
)


class DirectionMatch(NamedTuple):
    type: TransactionType
    start: int
    end: int


def find_direction_keyword(text: str) -> Optional[DirectionMatch]:
    """Earliest direction keyword in ``text``.

    DEBIT/CREDIT keywords win over neutral transaction words, which only
    produce ``TransactionType.UNKNOWN`` when nothing directional is present.
    """
    if not text:
        return None

    best: Optional[DirectionMatch] = None
    for txn_type, pattern in DIRECTION_CLASSES:
        match = pattern.search(text)
        if match and (best is None or match.start() < best.start):
            best = DirectionMatch(txn_type, match.start(), match.end())
    if best is not None:
        return best

    neutral = NEUTRAL_KEYWORDS.search(text)
    if neutral:
        return DirectionMatch(TransactionType.UNKNOWN, neutral.start(), neutral.end())
    return None


# ---------------------------------------------------------------------------
# Message filters
# ---------------------------------------------------------------------------

ONE_TIME_CODE_PATTERN = re.compile(
    r"\bOTP\b|\bone[\s-]*time[\s-]*(?:password|passcode|pin|code)\b|"
    r"\bverification\s*code\b|\bCVV\b|\bsecurity\s*code\b",
    re.IGNORECASE,
)

PROMOTIONAL_KEYWORDS = (
    "apply now",
    "interest rate",
    "pre-approved",
    "pre approved",
    "preapproved",
    "click here",
    "limited period",
    "offer valid",
    "avail now",
    "t&c apply",
    "loan offer",
    "upgrade now",
)

BALANCE_ENQUIRY_KEYWORDS = (
    "balance is",
    "bal is",
    "balance as on",
    "balance as of",
    "balance enquiry",
    "balance inquiry",
    "mini statement",
)


def contains_keyword(text: str, keywords: Sequence[str]) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


# ---------------------------------------------------------------------------
# Payment addresses (VPA)
# ---------------------------------------------------------------------------

PAYMENT_HANDLES = (
    "paytm", "okaxis", "okicici", "okhdfcbank", "okhdfc", "oksbi", "ybl",
    "ibl", "axl", "axisbank", "axis", "sbi", "sbibank", "icici", "icicibank",
    "hdfc", "hdfcbank", "upi", "apl", "indianbank", "indbank", "pnb", "bob",
    "unionbank", "ubibank", "canara", "canarabank", "cboi", "cbin",
    "barodapay", "federal", "rbl", "idfc", "idfcbank", "kotak", "kotakbank",
    "indus", "indusind", "yes", "yesbank", "dbs", "sc", "hsbc", "citi",
    "citibank", "jupiter", "freecharge", "mobikwik", "airtel", "olamoney",
    "jio", "postbank", "equitas", "dcu", "cub",
)

# Longest first so "okhdfcbank" is preferred over "okhdfc"
_HANDLE_ALTERNATION = "|".join(sorted(PAYMENT_HANDLES, key=len, reverse=True))

PAYMENT_ADDRESS = (
    r"(?<![A-Za-z0-9._-])"
    r"([A-Za-z0-9][A-Za-z0-9._-]*@(?:" + _HANDLE_ALTERNATION + r"))"
    r"(?![A-Za-z0-9_-]|\.[A-Za-z0-9])"
)

PAYMENT_ADDRESS_PATTERN = re.compile(PAYMENT_ADDRESS, re.IGNORECASE)


def _lower_address(match: re.Match) -> Optional[str]:
    return match.group(1).lower()


PAYMENT_ADDRESS_RULES: Tuple[Rule, ...] = (
    # (a) explicit labels
    rule("vpa_label", r"\b(?:VPA|UPI\s*ID)\b\s*:?\s*" + PAYMENT_ADDRESS, _lower_address),
    # (b) relational context
    rule("paid_to", r"\bpaid\s+to\s+" + PAYMENT_ADDRESS, _lower_address),
    rule("sent_to", r"\bsent\s+to\s+" + PAYMENT_ADDRESS, _lower_address),
    rule("received_from", r"\breceived\s+from\s+" + PAYMENT_ADDRESS, _lower_address),
    rule("to", r"\bto\s+" + PAYMENT_ADDRESS, _lower_address),
    rule("from", r"\bfrom\s+" + PAYMENT_ADDRESS, _lower_address),
    # (c) anywhere
    rule("bare", PAYMENT_ADDRESS, _lower_address),
)

INSTANT_PAYMENT_KEYWORDS = re.compile(
    r"\bUPI\b|\bVPA\b|\bGoogle\s*Pay\b|\bGPay\b|\bPhonePe\b|\bPaytm\b|\bBHIM\b|"
    r"\bAmazon\s*Pay\b",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Reference / transaction ids
# ---------------------------------------------------------------------------

# Must hold a digit, so words such as "Reversed" never pass as ids
_REF_VALUE = r"(?=[A-Z0-9]{3,})([A-Z0-9]*\d[A-Z0-9]*)\b"
_REF_SEP = r"[\s:.#-]*"

REFERENCE_RULES: Tuple[Rule, ...] = (
    rule(
        "app_reference",
        r"\b(?:Google(?:\s*Pay)?|GPay|PhonePe|Paytm|Amazon\s*Pay|BHIM|CRED)\s*"
        r"(?:Txn|Transaction|Ref(?:erence)?)\.?\s*(?:ID|No|Number)\b\.?"
        + _REF_SEP + _REF_VALUE,
    ),
    rule(
        "upi_reference",
        r"\bUPI\s*(?:Ref(?:erence)?|Txn|Transaction)\b\.?\s*(?:ID|No|Number)?\b\.?"
        + _REF_SEP + _REF_VALUE,
    ),
    rule("utr", r"\bUTR\b\.?\s*(?:No|Number)?\b\.?" + _REF_SEP + _REF_VALUE),
    rule(
        "txn_id",
        r"\b(?:Txn|Transaction)\s*(?:ID|No|Number)\b\.?" + _REF_SEP + _REF_VALUE,
    ),
    rule(
        "ref",
        r"\bRef(?:erence)?\b\.?\s*(?:ID|No|Number)?\b\.?" + _REF_SEP + _REF_VALUE,
    ),
    rule("rrn", r"\bRRN\b\.?\s*(?:No)?\b" + _REF_SEP + _REF_VALUE),
)


# ---------------------------------------------------------------------------
# Account suffix
# ---------------------------------------------------------------------------

_MASKED_DIGITS = r"[\s:.-]*[Xx*]*[\dXx*]*?(\d{4,6})(?!\d)"

ACCOUNT_RULES: Tuple[Rule, ...] = (
    rule(
        "account",
        r"\b(?:A/c|Ac|Acct|Account)\b\.?\s*(?:No\.?|Number)?\s*"
        r"(?:ending(?:\s+with)?)?" + _MASKED_DIGITS,
    ),
    rule(
        "card",
        r"\bCard\b\s*(?:No\.?|Number)?\s*(?:ending(?:\s+with)?)?" + _MASKED_DIGITS,
    ),
)


# ---------------------------------------------------------------------------
# Merchant / counterparty phrases
# ---------------------------------------------------------------------------

# Captured names stop at punctuation or at the next structural word
MERCHANT_BOUNDARY = (
    r"(?=\s+(?:on|via|using|for|ref|upi|a/c|acct|rs\.?|inr|completed|"
    r"successful(?:ly)?|is|has|was|with|dated|avl|bal|txn|utr|from|to|by|"
    r"thru|through|at)\b|\s*[₹.,;:!()\n]|\s*$)"
)

# Tokens that look like a name slot but are never a counterparty,
# including address labels ("to VPA x@ybl") and the address itself
_NOT_A_NAME = (
    r"(?!(?:your|you|a/c|acct|account|card|rs\.?|inr|vpa|upi\s*id)\b|[Xx*]+\d|"
    r"[A-Za-z0-9._-]*@)"
)

_NAME = r"([A-Za-z0-9][A-Za-z0-9 &'-]{0,48}?)"


def _merchant_rule(name: str, lead: str) -> Rule:
    return rule(name, lead + _NOT_A_NAME + _NAME + MERCHANT_BOUNDARY)


MERCHANT_RULES: Tuple[Rule, ...] = (
    _merchant_rule("paid_to", r"\bpaid\s+to\s+"),
    _merchant_rule("sent_to", r"\bsent\s+to\s+"),
    _merchant_rule("transferred_to", r"\btransferred\s+to\s+"),
    _merchant_rule("received_from", r"\breceived\s+from\s+"),
    _merchant_rule("to", r"\bto\s+"),
    _merchant_rule("from", r"\bfrom\s+"),
    _merchant_rule("at", r"\bat\s+"),
    _merchant_rule("info", r"\bInfo\s*:?\s*"),
)

# One trailing legal-entity suffix; "& Co" is part of the name
LEGAL_SUFFIX_PATTERN = re.compile(
    r"(?<!&)\s+(?:pvt\.?\s*ltd\.?|private\s+limited|ltd\.?|limited|inc\.?|"
    r"corp\.?|co\.?|company)\s*$",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

_PLACE_END = r"(?=\s+on\b|\s*[.,;\n]|\s*$)"

LOCATION_RULES: Tuple[Rule, ...] = (
    rule("label", r"\b(?:Location|Loc)\b\s*[:-]\s*([A-Za-z][A-Za-z0-9 '-]*?)" + _PLACE_END),
    rule("atm", r"\bat\s+([A-Za-z0-9 ]*?\bATM\b[A-Za-z0-9 ]*?)" + _PLACE_END),
    rule("branch", r"\bat\s+([A-Za-z0-9 ]+?\s+(?:BR|BRANCH))\b"),
    # "..., Mumbai on 01-Jan-26"; capitalisation marks the city
    rule(
        "city",
        r",\s*([A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+)?)\s+on\s+\d",
        flags=0,
    ),
)

LOCATION_NOISE_PATTERNS = (
    re.compile(r"\s+(?:BR|BRANCH)\.?$", re.IGNORECASE),
    re.compile(
        r"\s+(?:on\s+)?\d{1,2}[-/ ]?(?:[A-Za-z]{3}|\d{1,2})(?:[-/ ]?\d{2,4})?$",
        re.IGNORECASE,
    ),
    re.compile(r"[\s.,;:-]+$"),
)
