"""
Message classification.

Decides whether an SMS reports a completed money movement and, if so,
which parsing flow handles it. Checks run in a fixed order and the first
failing one rejects the message:

1. one-time codes are never transactions, whoever sent them
2. a direction keyword is required
3. a currency amount is required
4. promotions and balance enquiries are dropped
5. payment-app senders, and bank senders mentioning UPI or a payment
   address, go to the instant-payment flow
6. any other bank-like sender goes to the generic flow
"""

from enum import Enum
from typing import Iterable, List, Optional

from .banks import BankRegistry, build_default_registry
from .models import RawMessage, TransactionType
from .patterns import (
    AMOUNT_PATTERN,
    BALANCE_ENQUIRY_KEYWORDS,
    COMPLETED_TRANSACTION_VERBS,
    INSTANT_PAYMENT_KEYWORDS,
    ONE_TIME_CODE_PATTERN,
    PAYMENT_ADDRESS_PATTERN,
    PROMOTIONAL_KEYWORDS,
    contains_keyword,
    find_direction_keyword,
)


class MessageKind(str, Enum):
    REJECTED = "REJECTED"
    GENERIC_BANK = "GENERIC_BANK"
    INSTANT_PAYMENT = "INSTANT_PAYMENT"


class MessageClassifier:
    def __init__(self, registry: Optional[BankRegistry] = None):
        self.registry = registry or build_default_registry()

    def classify(self, message: RawMessage) -> MessageKind:
        return self.classify_text(message.sender_address, message.body)

    def classify_text(self, sender: str, body: str) -> MessageKind:
        if not body or not sender:
            return MessageKind.REJECTED

        if ONE_TIME_CODE_PATTERN.search(body):
            return MessageKind.REJECTED

        direction = find_direction_keyword(body)
        if direction is None:
            return MessageKind.REJECTED

        if not AMOUNT_PATTERN.search(body):
            return MessageKind.REJECTED

        if contains_keyword(body, PROMOTIONAL_KEYWORDS):
            return MessageKind.REJECTED
        if contains_keyword(body, BALANCE_ENQUIRY_KEYWORDS) and not COMPLETED_TRANSACTION_VERBS.search(body):
            return MessageKind.REJECTED

        if self._is_instant_payment(sender, body):
            # Instant payments always state a direction
            if direction.type == TransactionType.UNKNOWN:
                return MessageKind.REJECTED
            return MessageKind.INSTANT_PAYMENT

        if self.registry.is_bank_sender(sender):
            return MessageKind.GENERIC_BANK

        return MessageKind.REJECTED

    def _is_instant_payment(self, sender: str, body: str) -> bool:
        if self.registry.is_payment_app_sender(sender):
            return True
        if not self.registry.is_bank_sender(sender):
            return False
        return bool(
            INSTANT_PAYMENT_KEYWORDS.search(body) or PAYMENT_ADDRESS_PATTERN.search(body)
        )

    def is_transaction_message(self, message: RawMessage) -> bool:
        return self.classify(message) != MessageKind.REJECTED

    def is_instant_payment_message(self, message: RawMessage) -> bool:
        return self.classify(message) == MessageKind.INSTANT_PAYMENT

    def filter_transaction_messages(self, messages: Iterable[RawMessage]) -> List[RawMessage]:
        return [message for message in messages if self.is_transaction_message(message)]
