import pytest

from packages.sms_engine.banks import (
    BankConfig,
    BankRegistry,
    build_default_registry,
    looks_like_bank_sender,
    normalize_sender,
)
from packages.sms_engine.classifier import MessageClassifier, MessageKind

BALANCE_ENQUIRY = "Your A/c XX1234 balance is Rs.5000 as on 01-Jan"
GENERIC_DEBIT = (
    "Rs.5000 debited from A/c XX1234 on 01-Jan-26 at AMAZON. "
    "Ref 123456789012. Avl Bal Rs.25000"
)
GPAY_PAYMENT = "You paid Rs.450 to Swiggy via Google Pay. UPI Ref No 123456789012"


@pytest.fixture(scope="module")
def classifier():
    return MessageClassifier()


class TestRejection:
    def test_one_time_code_from_payment_app(self, classifier, make_message):
        message = make_message(
            "Your Google Pay OTP is 123456. Do not share it. Rs.500 debited",
            sender="VM-GPAY",
        )
        assert classifier.classify(message) == MessageKind.REJECTED

    def test_one_time_code_from_bank(self, classifier, make_message):
        message = make_message("OTP 482913 for txn of Rs.500 debited from A/c XX1234")
        assert not classifier.is_transaction_message(message)

    def test_balance_enquiry(self, classifier, make_message):
        assert not classifier.is_transaction_message(make_message(BALANCE_ENQUIRY))

    def test_balance_phrase_with_completed_transaction(self, classifier, make_message):
        message = make_message(
            "Rs.200 debited from A/c XX1234. Your balance is Rs.5000"
        )
        assert classifier.classify(message) == MessageKind.GENERIC_BANK

    def test_promotion(self, classifier, make_message):
        message = make_message(
            "Get a pre-approved loan of Rs.500000 credited instantly. Apply now"
        )
        assert not classifier.is_transaction_message(message)

    def test_missing_amount(self, classifier, make_message):
        message = make_message("Payment to merchant@paytm successful. Ref GP123", sender="GPAY")
        assert not classifier.is_transaction_message(message)

    def test_missing_direction(self, classifier, make_message):
        message = make_message("Your statement for Rs.2500 is ready", sender="VM-HDFCBK")
        assert not classifier.is_transaction_message(message)

    def test_non_financial_sender(self, classifier, make_message):
        assert not classifier.is_transaction_message(
            make_message("Your package has been delivered", sender="RANDOM")
        )
        assert not classifier.is_transaction_message(
            make_message("Rs.499 paid for your order", sender="AD-SWIGGY")
        )

    def test_neutral_keyword_rejected_for_instant_payment(self, classifier, make_message):
        message = make_message(
            "Transaction of Rs.100 to merchant@paytm. Ref GP123", sender="GPAY"
        )
        assert classifier.classify(message) == MessageKind.REJECTED


class TestAcceptance:
    def test_payment_app_sender(self, classifier, make_message):
        message = make_message(GPAY_PAYMENT, sender="VM-GPAY")
        assert classifier.classify(message) == MessageKind.INSTANT_PAYMENT
        assert classifier.is_instant_payment_message(message)

    def test_bank_sender_with_upi_keyword(self, classifier, make_message):
        message = make_message(GPAY_PAYMENT, sender="VM-HDFCBK")
        assert classifier.classify(message) == MessageKind.INSTANT_PAYMENT

    def test_bank_sender_with_payment_address(self, classifier, make_message):
        message = make_message("Rs.500 debited from A/c XX1234 to swiggy@okhdfc")
        assert classifier.classify(message) == MessageKind.INSTANT_PAYMENT

    def test_generic_bank(self, classifier, make_message):
        message = make_message(GENERIC_DEBIT, sender="VM-HDFCBK")
        assert classifier.classify(message) == MessageKind.GENERIC_BANK
        assert not classifier.is_instant_payment_message(message)

    def test_neutral_keyword_generic_bank(self, classifier, make_message):
        message = make_message("Txn of Rs.750 at STORE on 02-Jan", sender="VM-SBIINB")
        assert classifier.classify(message) == MessageKind.GENERIC_BANK

    def test_unregistered_bank_like_sender(self, classifier, make_message):
        message = make_message("Rs.300 debited from A/c XX7777", sender="AX-NEWBNK")
        assert classifier.classify(message) == MessageKind.GENERIC_BANK

    def test_filter_transaction_messages(self, classifier, make_message):
        kept = make_message(GENERIC_DEBIT, sms_id=1)
        dropped = make_message(BALANCE_ENQUIRY, sms_id=2)
        assert classifier.filter_transaction_messages([kept, dropped]) == [kept]


class TestBankRegistry:
    def test_lookup_is_case_insensitive(self):
        registry = build_default_registry()
        assert registry.find_bank_by_sender("vm-hdfcbk").bank_name == "HDFC Bank"

    def test_lookup_strips_prefix_and_suffix(self):
        registry = build_default_registry()
        assert normalize_sender("AD-PHONEPE-S") == "PHONEPE"
        assert registry.is_payment_app_sender("AD-PHONEPE-S")
        assert registry.find_bank_by_sender("JM-SBIINB").display_name == "SBI"

    def test_unknown_sender(self):
        registry = build_default_registry()
        assert registry.find_bank_by_sender("RANDOM") is None
        assert registry.find_bank_by_sender("") is None
        assert not registry.is_bank_sender("RANDOM")

    def test_payment_app_is_not_bank(self):
        registry = build_default_registry()
        assert not registry.is_bank_sender("GPAY")

    def test_custom_registration(self):
        registry = BankRegistry()
        registry.register_bank(BankConfig("Test Bank", "Test", ("TSTBNQ",)))
        assert len(registry) == 1
        assert registry.is_bank_sender("VM-TSTBNQ")
        assert registry.all_banks()[0].bank_name == "Test Bank"

    def test_heuristic(self):
        assert looks_like_bank_sender("AX-NEWBNK")
        assert looks_like_bank_sender("XY-ABCCARD")
        assert not looks_like_bank_sender("AD-AMAZON")
        assert not looks_like_bank_sender("")

    def test_heuristic_needs_token_at_header_end(self):
        # "CC" and "FIN" inside an ordinary word do not make a bank
        assert not looks_like_bank_sender("AD-SUCCES")
        assert not looks_like_bank_sender("VM-FINDIT")
        assert looks_like_bank_sender("JD-YONOSB")
