"""Message and transaction types shared by every stage of the engine."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .core.errors import InvalidMessageError


class TransactionType(str, Enum):
    """Direction of money movement relative to the account holder."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"
    UNKNOWN = "UNKNOWN"


UPI_PAYMENT_METHOD = "UPI"


@dataclass(frozen=True)
class RawMessage:
    """An SMS exactly as the inbox reader hands it over."""

    id: int
    sender_address: str
    body: str
    timestamp_millis: int
    is_read: bool = True

    # Inbox readers use either naming style
    _FIELD_ALIASES = {
        "id": ("id", "sms_id", "smsId"),
        "sender_address": ("sender_address", "senderAddress", "address"),
        "body": ("body",),
        "timestamp_millis": ("timestamp_millis", "timestampMillis", "date"),
        "is_read": ("is_read", "isRead"),
    }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "RawMessage":
        """Build a message from a reader payload, validating field types."""
        values: Dict[str, Any] = {}
        for field_name, aliases in cls._FIELD_ALIASES.items():
            for alias in aliases:
                if alias in payload:
                    values[field_name] = payload[alias]
                    break

        for required in ("id", "sender_address", "body", "timestamp_millis"):
            if values.get(required) is None:
                raise InvalidMessageError(
                    f"Message payload is missing '{required}'", field=required
                )

        for int_field in ("id", "timestamp_millis"):
            value = values[int_field]
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidMessageError(
                    f"'{int_field}' must be an integer, got {type(value).__name__}",
                    field=int_field,
                )

        for str_field in ("sender_address", "body"):
            if not isinstance(values[str_field], str):
                raise InvalidMessageError(
                    f"'{str_field}' must be a string", field=str_field
                )

        return cls(
            id=values["id"],
            sender_address=values["sender_address"],
            body=values["body"],
            timestamp_millis=values["timestamp_millis"],
            is_read=bool(values.get("is_read", True)),
        )


@dataclass(frozen=True)
class ParsedTransaction:
    """Standardized transaction extracted from one SMS."""

    sms_id: int
    amount: Decimal
    type: TransactionType
    merchant: Optional[str]
    account_number: Optional[str]
    reference_number: Optional[str]
    date: int  # epoch millis of the SMS
    raw_sms: str
    sender_address: str
    balance_after: Optional[Decimal] = None
    location: Optional[str] = None
    upi_id: Optional[str] = None
    payment_method: Optional[str] = None

    @property
    def is_instant_payment(self) -> bool:
        return self.payment_method == UPI_PAYMENT_METHOD

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage and DataFrame creation."""
        return {
            "sms_id": self.sms_id,
            "amount": self.amount,
            "type": self.type.value,
            "merchant": self.merchant,
            "account_number": self.account_number,
            "reference_number": self.reference_number,
            "date": self.date,
            "raw_sms": self.raw_sms,
            "sender_address": self.sender_address,
            "balance_after": self.balance_after,
            "location": self.location,
            "upi_id": self.upi_id,
            "payment_method": self.payment_method,
        }
