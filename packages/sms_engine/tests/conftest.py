from decimal import Decimal

import pytest

from packages.sms_engine.models import ParsedTransaction, RawMessage, TransactionType
from packages.sms_engine.parser import SmsTransactionParser

BASE_TIME = 1767225600000  # 2026-01-01T00:00:00Z


@pytest.fixture
def parser():
    return SmsTransactionParser()


@pytest.fixture
def make_message():
    def _make(body, sender="VM-HDFCBK", sms_id=1, timestamp_millis=BASE_TIME):
        return RawMessage(
            id=sms_id,
            sender_address=sender,
            body=body,
            timestamp_millis=timestamp_millis,
        )

    return _make


@pytest.fixture
def make_transaction():
    def _make(
        sms_id=1,
        amount="450.00",
        txn_type=TransactionType.DEBIT,
        date=BASE_TIME,
        reference=None,
        account="1234",
        balance=None,
    ):
        return ParsedTransaction(
            sms_id=sms_id,
            amount=Decimal(amount),
            type=txn_type,
            merchant="Swiggy",
            account_number=account,
            reference_number=reference,
            date=date,
            raw_sms="Rs.450 debited",
            sender_address="VM-HDFCBK",
            balance_after=Decimal(balance) if balance is not None else None,
        )

    return _make
