"""
SMS Transaction Parser

Turns one raw SMS into a ParsedTransaction. The classifier picks the flow
(rejected, generic bank, instant payment); every extractor then runs on
its own, so a field that fails to resolve only leaves that field empty.
A record is produced only when both amount and direction resolved.
"""

from typing import Iterable, List, Optional

import structlog

from .banks import BankRegistry
from .classifier import MessageClassifier, MessageKind
from .dedup import dedupe
from .extractors import (
    extract_account_number,
    extract_amount,
    extract_balance,
    extract_direction,
    extract_location,
    extract_reference,
    extract_upi_id,
)
from .merchant_extractor import MerchantExtractor
from .models import UPI_PAYMENT_METHOD, ParsedTransaction, RawMessage

logger = structlog.get_logger()


class SmsTransactionParser:
    """
    Main parser class for bank and payment-app SMS.

    Stateless after construction; a single instance can parse from many
    threads at once.
    """

    def __init__(
        self,
        registry: Optional[BankRegistry] = None,
        merchant_extractor: Optional[MerchantExtractor] = None,
        dedup_window_seconds: Optional[int] = None,
    ):
        self.classifier = MessageClassifier(registry)
        self.merchant_extractor = merchant_extractor or MerchantExtractor()
        self.dedup_window_seconds = dedup_window_seconds

    def is_transaction_message(self, message: RawMessage) -> bool:
        return self.classifier.is_transaction_message(message)

    def parse(self, message: RawMessage) -> Optional[ParsedTransaction]:
        kind = self.classifier.classify(message)
        if kind == MessageKind.INSTANT_PAYMENT:
            return self.parse_instant_payment(message)
        if kind == MessageKind.GENERIC_BANK:
            return self.parse_generic(message)

        logger.debug("sms_rejected", sms_id=message.id, sender=message.sender_address)
        return None

    def parse_instant_payment(self, message: RawMessage) -> Optional[ParsedTransaction]:
        body = message.body
        amount = extract_amount(body)
        direction = extract_direction(body)
        if amount is None or direction is None:
            logger.debug("sms_core_fields_missing", sms_id=message.id, flow="instant")
            return None

        upi_id = extract_upi_id(body)
        return ParsedTransaction(
            sms_id=message.id,
            amount=amount,
            type=direction,
            merchant=self.merchant_extractor.extract(body),
            account_number=extract_account_number(body),
            reference_number=extract_reference(body),
            date=message.timestamp_millis,
            raw_sms=body,
            sender_address=message.sender_address,
            balance_after=extract_balance(body),
            location=None,
            upi_id=upi_id,
            payment_method=UPI_PAYMENT_METHOD,
        )

    def parse_generic(self, message: RawMessage) -> Optional[ParsedTransaction]:
        body = message.body
        amount = extract_amount(body)
        direction = extract_direction(body)
        if amount is None or direction is None:
            logger.debug("sms_core_fields_missing", sms_id=message.id, flow="generic")
            return None

        return ParsedTransaction(
            sms_id=message.id,
            amount=amount,
            type=direction,
            merchant=self.merchant_extractor.extract(body),
            account_number=extract_account_number(body),
            reference_number=extract_reference(body),
            date=message.timestamp_millis,
            raw_sms=body,
            sender_address=message.sender_address,
            balance_after=extract_balance(body),
            location=extract_location(body),
        )

    def parse_all(self, messages: Iterable[RawMessage]) -> List[ParsedTransaction]:
        """Parse a batch in order, dropping messages that yield nothing."""
        transactions = []
        for message in messages:
            transaction = self.parse(message)
            if transaction is not None:
                transactions.append(transaction)
        return transactions

    def parse_and_deduplicate(self, messages: Iterable[RawMessage]) -> List[ParsedTransaction]:
        transactions = self.parse_all(messages)
        unique = dedupe(transactions, self.dedup_window_seconds)
        logger.info(
            "batch_parsed",
            parsed=len(transactions),
            unique=len(unique),
        )
        return unique


_default_parser = SmsTransactionParser()


def parse(message: RawMessage) -> Optional[ParsedTransaction]:
    """Parse one message with the default parser."""
    return _default_parser.parse(message)


def is_transaction_message(message: RawMessage) -> bool:
    return _default_parser.is_transaction_message(message)


__all__ = ["SmsTransactionParser", "parse", "is_transaction_message", "dedupe"]
