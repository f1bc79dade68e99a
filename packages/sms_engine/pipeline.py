"""
Batch pipeline: inbox messages in, unique transactions out.

Reading the inbox and storing results belong to the host application.
They plug in through the MessageSource and TransactionSink protocols.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

import pandas as pd
import structlog

from .core.config import Settings, get_settings
from .core.logging import message_context
from .dedup import dedupe, transaction_fingerprint
from .merchant_extractor import MerchantExtractor
from .models import ParsedTransaction, RawMessage
from .parser import SmsTransactionParser

logger = structlog.get_logger()

DATAFRAME_COLUMNS = [
    "sms_id",
    "timestamp",
    "amount",
    "type",
    "merchant",
    "account_number",
    "reference_number",
    "balance_after",
    "location",
    "upi_id",
    "payment_method",
    "sender_address",
    "raw_sms",
    "fingerprint",
]


class MessageSource(Protocol):
    def read_messages(self, since_millis: Optional[int] = None) -> Iterable[RawMessage]:
        ...


class TransactionSink(Protocol):
    def save_transactions(self, transactions: Sequence[ParsedTransaction]) -> int:
        ...


def messages_since(
    messages: Iterable[RawMessage], since_millis: Optional[int]
) -> List[RawMessage]:
    """Messages strictly newer than ``since_millis`` (all when None)."""
    if since_millis is None:
        return list(messages)
    return [message for message in messages if message.timestamp_millis > since_millis]


class SmsBatchProcessor:
    """
    Parses a batch on a thread pool, then deduplicates it.

    One bad message never costs the rest of the batch: a failure is logged
    with the message's id and that message is skipped.
    """

    def __init__(
        self,
        parser: Optional[SmsTransactionParser] = None,
        max_workers: Optional[int] = None,
        dedup_window_seconds: Optional[int] = None,
    ):
        self.parser = parser or SmsTransactionParser()
        self.max_workers = max_workers
        self.dedup_window_seconds = dedup_window_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmsBatchProcessor":
        parser = SmsTransactionParser(
            merchant_extractor=MerchantExtractor(
                min_length=settings.MIN_MERCHANT_LENGTH,
                max_length=settings.MAX_MERCHANT_LENGTH,
            ),
            dedup_window_seconds=settings.DEDUP_WINDOW_SECONDS,
        )
        return cls(
            parser=parser,
            max_workers=settings.PARSE_WORKERS,
            dedup_window_seconds=settings.DEDUP_WINDOW_SECONDS,
        )

    def _parse_one(self, message: RawMessage) -> Optional[ParsedTransaction]:
        with message_context(message):
            try:
                return self.parser.parse(message)
            except Exception as e:
                logger.warning("message_parse_failed", error=str(e))
                return None

    def process(self, messages: Iterable[RawMessage]) -> List[ParsedTransaction]:
        messages = list(messages)
        if not messages:
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            results = list(pool.map(self._parse_one, messages))

        transactions = [txn for txn in results if txn is not None]
        unique = dedupe(transactions, self.dedup_window_seconds)
        logger.info(
            "batch_processed",
            received=len(messages),
            parsed=len(transactions),
            unique=len(unique),
        )
        return unique


def process_messages(
    messages: Iterable[RawMessage], max_workers: Optional[int] = None
) -> List[ParsedTransaction]:
    """Parse and deduplicate a batch with the default parser."""
    return SmsBatchProcessor(max_workers=max_workers).process(messages)


def _to_row(record: ParsedTransaction) -> Dict[str, Any]:
    row = record.to_dict()
    row["timestamp"] = pd.to_datetime(record.date, unit="ms", utc=True)
    row["amount"] = float(record.amount)
    row["balance_after"] = (
        float(record.balance_after) if record.balance_after is not None else None
    )
    row["fingerprint"] = transaction_fingerprint(record)
    return row


def transactions_to_dataframe(records: Iterable[ParsedTransaction]) -> pd.DataFrame:
    """
    Tabular view of parsed transactions for export and analysis.

    Returns:
        DataFrame with columns: sms_id, timestamp, amount, type, merchant,
                                account_number, reference_number,
                                balance_after, location, upi_id,
                                payment_method, sender_address, raw_sms,
                                fingerprint
    """
    rows = [_to_row(record) for record in records]
    return pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)


def run_pipeline(
    source: MessageSource,
    sink: TransactionSink,
    since_millis: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> int:
    """Read new messages, parse and deduplicate them, hand them to the sink.

    Returns:
        Number of transactions the sink reports as saved.
    """
    settings = settings or get_settings()
    processor = SmsBatchProcessor.from_settings(settings)

    messages = messages_since(source.read_messages(since_millis), since_millis)
    transactions = processor.process(messages)
    if not transactions:
        logger.info("pipeline_no_transactions", received=len(messages))
        return 0

    saved = sink.save_transactions(transactions)
    logger.info("pipeline_completed", received=len(messages), saved=saved)
    return saved
