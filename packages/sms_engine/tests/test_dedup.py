from packages.sms_engine.dedup import dedupe, transaction_fingerprint
from packages.sms_engine.models import TransactionType

BASE_TIME = 1767225600000
SECOND = 1000


class TestReferencedRecords:
    def test_same_reference_keeps_newest(self, make_transaction):
        older = make_transaction(sms_id=1, reference="123456789012", date=BASE_TIME)
        newer = make_transaction(sms_id=2, reference="123456789012", date=BASE_TIME + 5 * SECOND)

        assert dedupe([older, newer]) == [newer]
        assert dedupe([newer, older]) == [newer]

    def test_distinct_references_kept(self, make_transaction):
        first = make_transaction(sms_id=1, reference="REF111")
        second = make_transaction(sms_id=2, reference="REF222")
        assert len(dedupe([first, second])) == 2

    def test_reference_ignores_window(self, make_transaction):
        first = make_transaction(sms_id=1, reference="REF111", date=BASE_TIME)
        second = make_transaction(sms_id=2, reference="REF222", date=BASE_TIME + SECOND)
        assert len(dedupe([first, second])) == 2


class TestWindow:
    def test_thirty_seconds_apart_collapse(self, make_transaction):
        first = make_transaction(sms_id=1, date=BASE_TIME)
        second = make_transaction(sms_id=2, date=BASE_TIME + 30 * SECOND)

        assert dedupe([first, second]) == [first]

    def test_two_minutes_apart_kept(self, make_transaction):
        first = make_transaction(sms_id=1, date=BASE_TIME)
        second = make_transaction(sms_id=2, date=BASE_TIME + 120 * SECOND)

        assert dedupe([first, second]) == [second, first]

    def test_chain_collapses_to_earliest(self, make_transaction):
        records = [
            make_transaction(sms_id=3, date=BASE_TIME + 100 * SECOND),
            make_transaction(sms_id=1, date=BASE_TIME),
            make_transaction(sms_id=2, date=BASE_TIME + 50 * SECOND),
        ]
        result = dedupe(records)
        assert [r.sms_id for r in result] == [1]

    def test_fields_must_match(self, make_transaction):
        base = make_transaction(sms_id=1)
        other_amount = make_transaction(sms_id=2, amount="451.00")
        other_type = make_transaction(sms_id=3, txn_type=TransactionType.CREDIT)
        other_account = make_transaction(sms_id=4, account="9999")
        other_balance = make_transaction(sms_id=5, balance="100.00")

        assert len(dedupe([base, other_amount, other_type, other_account, other_balance])) == 5

    def test_absent_fields_match(self, make_transaction):
        first = make_transaction(sms_id=1, account=None, balance=None)
        second = make_transaction(sms_id=2, account=None, balance=None, date=BASE_TIME + SECOND)
        assert dedupe([first, second]) == [first]

    def test_equal_amounts_with_different_scale(self, make_transaction):
        first = make_transaction(sms_id=1, amount="450")
        second = make_transaction(sms_id=2, amount="450.00", date=BASE_TIME + SECOND)
        assert len(dedupe([first, second])) == 1

    def test_custom_window(self, make_transaction):
        first = make_transaction(sms_id=1, date=BASE_TIME)
        second = make_transaction(sms_id=2, date=BASE_TIME + 30 * SECOND)
        assert len(dedupe([first, second], window_seconds=10)) == 2


class TestOrdering:
    def test_descending_by_date_then_id(self, make_transaction):
        records = [
            make_transaction(sms_id=1, reference="A1", date=BASE_TIME),
            make_transaction(sms_id=3, reference="A3", date=BASE_TIME),
            make_transaction(sms_id=2, reference="A2", date=BASE_TIME + SECOND),
        ]
        assert [r.sms_id for r in dedupe(records)] == [2, 3, 1]

    def test_empty(self):
        assert dedupe([]) == []


def test_idempotent(make_transaction):
    records = [
        make_transaction(sms_id=1, reference="REF1", date=BASE_TIME),
        make_transaction(sms_id=2, reference="REF1", date=BASE_TIME + 2 * SECOND),
        make_transaction(sms_id=3, date=BASE_TIME),
        make_transaction(sms_id=4, date=BASE_TIME + 40 * SECOND),
        make_transaction(sms_id=5, date=BASE_TIME + 90 * SECOND),
        make_transaction(sms_id=6, date=BASE_TIME + 300 * SECOND),
        make_transaction(sms_id=7, amount="99.00", date=BASE_TIME + 10 * SECOND),
    ]
    once = dedupe(records)
    assert dedupe(once) == once
    assert dedupe(list(reversed(records))) == once


class TestFingerprint:
    def test_stable(self, make_transaction):
        record = make_transaction()
        assert transaction_fingerprint(record) == transaction_fingerprint(make_transaction())
        assert len(transaction_fingerprint(record)) == 64

    def test_reference_only(self, make_transaction):
        first = make_transaction(sms_id=1, reference="ABC123", date=BASE_TIME)
        second = make_transaction(sms_id=2, reference="ABC123", amount="1.00", date=BASE_TIME + SECOND)
        assert transaction_fingerprint(first) == transaction_fingerprint(second)

    def test_reference_is_case_sensitive_like_dedupe(self, make_transaction):
        lower = make_transaction(sms_id=1, reference="abc123")
        upper = make_transaction(sms_id=2, reference="ABC123")

        assert transaction_fingerprint(lower) != transaction_fingerprint(upper)
        assert len(dedupe([lower, upper])) == 2

    def test_differentiation(self, make_transaction):
        base = transaction_fingerprint(make_transaction())
        assert base != transaction_fingerprint(make_transaction(date=BASE_TIME + SECOND))
        assert base != transaction_fingerprint(make_transaction(amount="450.01"))
        assert base != transaction_fingerprint(make_transaction(balance="10.00"))
