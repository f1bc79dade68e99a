import re
from decimal import Decimal

from packages.sms_engine.models import TransactionType
from packages.sms_engine.patterns import (
    PAYMENT_ADDRESS_PATTERN,
    REFERENCE_RULES,
    Rule,
    find_direction_keyword,
    first_match,
    match_rule,
    parse_decimal,
)


def _always(value):
    return lambda match: value


class TestRuleEvaluation:
    def test_first_rule_wins(self):
        rules = (
            Rule("first", re.compile("abc"), _always("one")),
            Rule("second", re.compile("abc"), _always("two")),
        )
        assert first_match(rules, "xx abc xx") == "one"

    def test_none_transform_falls_through(self):
        rules = (
            Rule("skipped", re.compile("abc"), _always(None)),
            Rule("used", re.compile("abc"), _always("two")),
        )
        assert match_rule(rules, "abc") == ("used", "two")

    def test_no_match_or_empty_text(self):
        rules = (Rule("only", re.compile("abc"), _always("one")),)
        assert first_match(rules, "xyz") is None
        assert first_match(rules, "") is None

    def test_reference_priority_reports_rule(self):
        body = "Ref: 111222333. PhonePe Txn ID PP987654321"
        assert match_rule(REFERENCE_RULES, body) == ("app_reference", "PP987654321")


class TestParseDecimal:
    def test_indian_grouping(self):
        assert parse_decimal("1,25,000.50") == Decimal("125000.50")

    def test_invalid(self):
        assert parse_decimal("abc") is None
        assert parse_decimal("") is None
        assert parse_decimal(None) is None


class TestDirectionKeyword:
    def test_earliest_keyword_decides(self):
        found = find_direction_keyword("Refund of Rs.500 credited for your purchase")
        assert found.type == TransactionType.CREDIT
        assert found.start == 0

    def test_card_names_are_not_directions(self):
        found = find_direction_keyword("Credit Card XX1234 used for Rs.500")
        assert found.type == TransactionType.DEBIT

    def test_neutral_keyword(self):
        found = find_direction_keyword("Transaction of Rs.100 at STORE")
        assert found.type == TransactionType.UNKNOWN

    def test_reference_labels_are_not_keywords(self):
        assert find_direction_keyword("UPI Txn ID 123456") is None
        assert find_direction_keyword("Hello there") is None


class TestPaymentAddressPattern:
    def test_longest_handle(self):
        match = PAYMENT_ADDRESS_PATTERN.search("pay user@okhdfcbank now")
        assert match.group(1) == "user@okhdfcbank"

    def test_email_domain_rejected(self):
        assert PAYMENT_ADDRESS_PATTERN.search("mail support@paytm.com") is None
        assert PAYMENT_ADDRESS_PATTERN.search("mail foo@sbibank.com") is None

    def test_unknown_handle_rejected(self):
        assert PAYMENT_ADDRESS_PATTERN.search("salary@company") is None

    def test_sentence_end(self):
        match = PAYMENT_ADDRESS_PATTERN.search("Paid to merchant@paytm.")
        assert match.group(1) == "merchant@paytm"
