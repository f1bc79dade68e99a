"""
SMS Transaction Engine

Classification, field extraction and deduplication of bank and
payment-app transaction SMS.
"""

__version__ = "0.1.0"

from .models import ParsedTransaction, RawMessage, TransactionType
from .parser import SmsTransactionParser, parse, is_transaction_message
from .dedup import dedupe, transaction_fingerprint
from .merchant_extractor import MerchantExtractor
from .pipeline import process_messages, run_pipeline, transactions_to_dataframe

__all__ = [
    "ParsedTransaction",
    "RawMessage",
    "TransactionType",
    "SmsTransactionParser",
    "parse",
    "is_transaction_message",
    "dedupe",
    "transaction_fingerprint",
    "MerchantExtractor",
    "process_messages",
    "run_pipeline",
    "transactions_to_dataframe",
]
