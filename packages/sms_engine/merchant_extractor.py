import re
from typing import Optional

from .core.config import DEFAULT_MAX_MERCHANT_LENGTH, DEFAULT_MIN_MERCHANT_LENGTH
from .patterns import (
    LEGAL_SUFFIX_PATTERN,
    MERCHANT_RULES,
    PAYMENT_ADDRESS_RULES,
    first_match,
)

_ADDRESS_SEPARATORS = re.compile(r"[._-]+")


def _title_word(word: str) -> str:
    return word[:1].upper() + word[1:].lower()


def normalize_merchant_name(
    raw: Optional[str], max_length: int = DEFAULT_MAX_MERCHANT_LENGTH
) -> Optional[str]:
    """Collapse whitespace, title-case, drop one legal suffix, cap length."""
    if not raw:
        return None

    name = re.sub(r"\s+", " ", raw).strip()
    name = LEGAL_SUFFIX_PATTERN.sub("", name).strip()
    name = " ".join(_title_word(word) for word in name.split(" "))
    name = name[:max_length].rstrip()

    # Pure numbers ("at 10:30") are never a counterparty
    if not re.search(r"[A-Za-z]", name):
        return None
    return name


def extract_merchant_from_address(
    address: Optional[str],
    min_length: int = DEFAULT_MIN_MERCHANT_LENGTH,
    max_length: int = DEFAULT_MAX_MERCHANT_LENGTH,
) -> Optional[str]:
    """Human-readable name from a payment address local part.

    'john.doe@oksbi' -> 'John Doe', 'merchant123@paytm' -> 'Merchant'.
    """
    if not address or "@" not in address:
        return None

    local = address.split("@", 1)[0]
    if len(local) < min_length:
        return None

    # Digits go only when enough of the name is left without them
    without_digits = re.sub(r"\d+", "", local)
    if len(_ADDRESS_SEPARATORS.sub("", without_digits)) >= min_length:
        local = without_digits

    words = [part for part in _ADDRESS_SEPARATORS.split(local) if part]
    if not words:
        return None
    return " ".join(_title_word(word) for word in words)[:max_length].rstrip()


class MerchantExtractor:
    def __init__(
        self,
        min_length: int = DEFAULT_MIN_MERCHANT_LENGTH,
        max_length: int = DEFAULT_MAX_MERCHANT_LENGTH,
    ):
        self.min_length = min_length
        self.max_length = max_length
        # Ordered: explicit payee phrases before bare prepositions
        self.phrase_rules = MERCHANT_RULES

    def extract(self, body: Optional[str]) -> Optional[str]:
        if not body:
            return None

        # Strategy 1: named counterparty phrase ("paid to X", "at X")
        for phrase_rule in self.phrase_rules:
            for match in phrase_rule.regex.finditer(body):
                name = normalize_merchant_name(match.group(1), self.max_length)
                if name:
                    return name

        # Strategy 2: derive a name from the payment address
        address = first_match(PAYMENT_ADDRESS_RULES, body)
        return self.from_address(address)

    def from_address(self, address: Optional[str]) -> Optional[str]:
        return extract_merchant_from_address(address, self.min_length, self.max_length)
