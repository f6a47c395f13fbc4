# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest

from photo_editor.models.credit import CreditTransaction, CreditTransactionType
from photo_editor.services.credit import (
    CreditGate,
    DatabaseCreditLedger,
    InsufficientCreditsError,
    LedgerError,
)


@pytest.fixture
def ledger():
    return DatabaseCreditLedger(initial_balance=0)


@pytest.mark.unit
class TestDatabaseCreditLedger:
    def test_unknown_user_has_initial_balance(self, test_db):
        assert DatabaseCreditLedger(initial_balance=5).get_balance(test_db, "nobody") == 5

    def test_grant_then_consume(self, test_db, ledger, test_user_id):
        ledger.grant(test_db, test_user_id, 20, "welcome")

        ledger.consume(test_db, test_user_id, 8, "AI photo edit")
        test_db.commit()

        assert ledger.get_balance(test_db, test_user_id) == 12
        entries = (
            test_db.query(CreditTransaction)
            .filter(CreditTransaction.user_id == test_user_id)
            .order_by(CreditTransaction.id)
            .all()
        )
        assert [(e.type, e.amount) for e in entries] == [
            (CreditTransactionType.GRANT, 20),
            (CreditTransactionType.CONSUME, -8),
        ]

    def test_consume_more_than_balance_leaves_balance_untouched(
        self, test_db, ledger, test_user_id
    ):
        ledger.grant(test_db, test_user_id, 5, "welcome")

        with pytest.raises(InsufficientCreditsError) as exc_info:
            ledger.consume(test_db, test_user_id, 8, "AI photo edit")

        assert exc_info.value.required == 8
        assert exc_info.value.available == 5
        assert ledger.get_balance(test_db, test_user_id) == 5

    def test_non_positive_amount_is_rejected(self, test_db, ledger, test_user_id):
        with pytest.raises(LedgerError):
            ledger.consume(test_db, test_user_id, 0, "nothing")


@pytest.mark.unit
class TestCreditGate:
    def test_authorize_reports_balance(self, test_db, ledger, test_user_id):
        ledger.grant(test_db, test_user_id, 10, "welcome")
        gate = CreditGate(ledger)

        ok = gate.authorize(test_db, test_user_id, 8)
        short = gate.authorize(test_db, test_user_id, 12)

        assert ok.ok is True
        assert ok.current_balance == 10
        assert short.ok is False
        assert short.required == 12
