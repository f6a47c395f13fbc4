# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Credit ledger and the gate that reserves generation cost before dispatch.

The ledger is an external collaborator with two operations, reading a
balance and consuming an amount with a description. Consumption is atomic per
call and never refunded by this service, even when the provider later rejects
the job.

DatabaseCreditLedger is the shipped implementation. Its consume() only
flushes, so the debit commits together with the task record created by the
caller.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from photo_editor.core.config import settings
from photo_editor.models.credit import (
    CreditTransaction,
    CreditTransactionType,
    UserCredit,
)
from photo_editor.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """The ledger could not record a debit"""


class InsufficientCreditsError(Exception):
    """Balance is lower than the requested amount"""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient credits: {required} required, {available} available"
        )


class CreditLedger(ABC):
    """Credit ledger interface"""

    @abstractmethod
    def get_balance(self, db: Session, user_id: str) -> int:
        """Current balance of the user"""

    @abstractmethod
    def consume(self, db: Session, user_id: str, amount: int, description: str) -> None:
        """
        Debit amount from the user's balance.

        Raises:
            InsufficientCreditsError: balance is lower than amount
            LedgerError: the debit could not be recorded
        """


class DatabaseCreditLedger(CreditLedger):
    """Ledger stored in the user_credits / credit_transactions tables"""

    def __init__(self, initial_balance: int = None):
        self.initial_balance = (
            settings.CREDITS_INITIAL_BALANCE
            if initial_balance is None
            else initial_balance
        )

    def _ensure_account(self, db: Session, user_id: str) -> None:
        if db.get(UserCredit, user_id) is not None:
            return
        try:
            with db.begin_nested():
                db.add(UserCredit(user_id=user_id, balance=self.initial_balance))
        except IntegrityError:
            # Created concurrently by another request
            logger.debug(f"[Credits] Account for user {user_id} already exists")

    def get_balance(self, db: Session, user_id: str) -> int:
        account = db.get(UserCredit, user_id)
        if account is None:
            return self.initial_balance
        db.refresh(account)
        return account.balance

    def consume(self, db: Session, user_id: str, amount: int, description: str) -> None:
        if amount <= 0:
            raise LedgerError(f"Consumption amount must be positive, got {amount}")

        try:
            self._ensure_account(db, user_id)
            # Conditional debit keeps the balance non-negative without locking
            rows_updated = (
                db.query(UserCredit)
                .filter(UserCredit.user_id == user_id, UserCredit.balance >= amount)
                .update(
                    {
                        UserCredit.balance: UserCredit.balance - amount,
                        UserCredit.updated_at: utc_now(),
                    },
                    synchronize_session=False,
                )
            )
            if rows_updated == 0:
                raise InsufficientCreditsError(
                    required=amount, available=self.get_balance(db, user_id)
                )

            db.add(
                CreditTransaction(
                    user_id=user_id,
                    type=CreditTransactionType.CONSUME,
                    amount=-amount,
                    description=description,
                )
            )
            db.flush()
        except SQLAlchemyError as e:
            raise LedgerError(f"Failed to consume credits: {e}") from e

        logger.info(
            f"[Credits] Consumed {amount} credits from user {user_id}: {description}"
        )

    def grant(self, db: Session, user_id: str, amount: int, description: str) -> int:
        """Add credits to a user's balance and return the new balance"""
        self._ensure_account(db, user_id)
        db.query(UserCredit).filter(UserCredit.user_id == user_id).update(
            {
                UserCredit.balance: UserCredit.balance + amount,
                UserCredit.updated_at: utc_now(),
            },
            synchronize_session=False,
        )
        db.add(
            CreditTransaction(
                user_id=user_id,
                type=CreditTransactionType.GRANT,
                amount=amount,
                description=description,
            )
        )
        db.commit()
        return self.get_balance(db, user_id)


@dataclass
class CreditAuthorization:
    ok: bool
    current_balance: int
    required: int


class CreditGate:
    """Checks and reserves the cost of a generation against the ledger"""

    def __init__(self, ledger: CreditLedger):
        self.ledger = ledger

    def authorize(self, db: Session, user_id: str, required: int) -> CreditAuthorization:
        balance = self.ledger.get_balance(db, user_id)
        return CreditAuthorization(
            ok=balance >= required, current_balance=balance, required=required
        )

    def consume(self, db: Session, user_id: str, amount: int, description: str) -> None:
        self.ledger.consume(db, user_id, amount, description)


credit_ledger = DatabaseCreditLedger()
credit_gate = CreditGate(credit_ledger)
