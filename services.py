"""
services.py
Fee calculation, payment registration, reminders and member lifecycle.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

from loguru import logger

import store
import utils
from errors import IntegrityError, InvalidInput, NotFound
from models import JUNIOR_AGE_LIMIT, Member, MembershipStatus, Payment, PaymentStatus
from repositories import MemberRepository, PaymentRepository

PASSIVE_FEE = 500.0
SENIOR_DISCOUNT_AGE = 60
SENIOR_DISCOUNT = 0.75


class PaymentService:
    def __init__(
        self,
        payment_repository: PaymentRepository,
        member_repository: MemberRepository,
        payments_path: str | Path,
        rates_path: str | Path,
    ):
        self.payment_repository = payment_repository
        self.member_repository = member_repository
        self.payments_path = Path(payments_path)
        self.rates_path = Path(rates_path)
        self.junior_rate, self.senior_rate = store.load_rates(self.rates_path)

    # ---------- Rates ----------

    def reload_rates(self) -> tuple[float, float]:
        self.junior_rate, self.senior_rate = store.load_rates(self.rates_path)
        return self.get_payment_rates()

    def get_payment_rates(self) -> tuple[float, float]:
        return self.junior_rate, self.senior_rate

    def set_junior_rate(self, rate: float) -> None:
        self.set_payment_rates(rate, self.senior_rate)

    def set_senior_rate(self, rate: float) -> None:
        self.set_payment_rates(self.junior_rate, rate)

    def set_payment_rates(self, junior_rate: float, senior_rate: float) -> None:
        for label, rate in (("junior", junior_rate), ("senior", senior_rate)):
            if not utils.is_valid_payment_amount(rate):
                raise InvalidInput(f"Invalid {label} rate: Rate must be greater than 0.")
        self.junior_rate = float(junior_rate)
        self.senior_rate = float(senior_rate)
        store.save_rates(self.rates_path, self.junior_rate, self.senior_rate)
        logger.info(f"Payment rates updated: junior={self.junior_rate}, senior={self.senior_rate}")

    # ---------- Fees ----------

    def calculate_membership_fee(self, member: Member) -> float:
        """
        Passive members pay a flat 500. Active members pay the junior rate under 18,
        the senior rate from 18, and 75% of the senior rate from 60.
        """
        if member.membership_status == MembershipStatus.PASSIVE:
            return PASSIVE_FEE
        if member.age < JUNIOR_AGE_LIMIT:
            return self.junior_rate
        if member.age < SENIOR_DISCOUNT_AGE:
            return self.senior_rate
        return self.senior_rate * SENIOR_DISCOUNT

    def calculate_total_expected_payments(self, members: list[Member]) -> float:
        return sum(self.calculate_membership_fee(m) for m in members)

    # ---------- Payments ----------

    def register_payment(self, member_id: int, amount: float, payment_date: date | None = None) -> Payment:
        """
        Record a COMPLETE payment and mark the member as paid.
        Any positive amount settles the member; it is not compared to the computed fee.
        """
        utils.validate_payment(amount, PaymentStatus.COMPLETE)
        member = self.member_repository.find_by_id(member_id)
        if member is None:
            raise NotFound(f"Member not found with ID: {member_id}")

        payment = Payment(
            payment_id=self.payment_repository.get_next_payment_id(),
            payment_status=PaymentStatus.COMPLETE,
            member=member,
            payment_date=payment_date or date.today(),
            amount_per_year=amount,
        )
        if not self.payment_repository.save(payment):
            raise IntegrityError(
                f"Payment ID {payment.payment_id} is already taken; payment for member {member_id} not recorded."
            )
        member.payment_status = PaymentStatus.COMPLETE
        self.payment_repository.write_payments(self.payments_path)
        # Members are rewritten too so the status survives a member reload
        self.member_repository.update(member)
        logger.info(f"Registered payment {payment.payment_id} of {utils.format_dkk(amount)} DKK for member {member_id}")
        return payment

    def update_member_payment_status(self, member: Member, status: PaymentStatus | str) -> None:
        member.payment_status = PaymentStatus.parse(status)
        self.member_repository.update(member)

    def get_payments_for_member(self, member_id: int) -> list[Payment]:
        return self.payment_repository.find_payments_by_member_id(member_id)

    def get_total_payments_for_member(self, member_id: int) -> float:
        return sum(p.amount_per_year for p in self.get_payments_for_member(member_id))

    # ---------- Reporting ----------

    def get_members_by_payment_status(self, members: list[Member], status: PaymentStatus | str) -> list[Member]:
        status = PaymentStatus.parse(status)
        return [m for m in members if m.payment_status == status]

    def get_members_paid_list(self, members: list[Member]) -> list[Member]:
        return self.get_members_by_payment_status(members, PaymentStatus.COMPLETE)

    def get_members_pending_list(self, members: list[Member]) -> list[Member]:
        return self.get_members_by_payment_status(members, PaymentStatus.PENDING)

    def get_payment_summary(self, members: list[Member]) -> str:
        # Collected total comes from the fee model, not from recorded payment amounts
        paid = self.get_members_paid_list(members)
        pending = self.get_members_pending_list(members)
        collected = self.calculate_total_expected_payments(paid)
        return (
            f"Total Members Paid: {len(paid)}\n"
            f"Total Members Pending: {len(pending)}\n"
            f"Total Payments Collected: {utils.format_dkk(collected)} DKK"
        )

    # ---------- Reminders ----------

    def set_payment_reminder(self, member_id: int, message: str) -> str:
        member = self.member_repository.find_by_id(member_id)
        if member is None:
            raise NotFound(f"Member not found with ID: {member_id}")
        reminder = f"Member ID {member_id}: {message}"
        utils.validate_reminder(reminder)
        self.payment_repository.save_reminder(reminder)
        return reminder

    def get_all_reminders(self) -> list[str]:
        return self.payment_repository.get_reminders()

    def remove_reminder(self, reminder: str) -> bool:
        return self.payment_repository.remove_reminder(reminder)

    def clear_reminders(self) -> None:
        self.payment_repository.clear_reminders()


class MemberService:
    def __init__(self, repository: MemberRepository, payment_repository: PaymentRepository):
        self.repository = repository
        self.payment_repository = payment_repository

    def register_member(self, member: Member) -> Member:
        """Validate, assign the next id, save, then reload from the store."""
        utils.validate_member(member)
        member.member_id = self.repository.get_next_member_id()
        self.repository.save(member)
        self.repository.reload_members()
        return self.repository.find_by_id(member.member_id) or member

    def update_member(self, member: Member) -> Member:
        utils.validate_member(member)
        updated = self.repository.update(member)
        self.repository.reload_members()
        return self.repository.find_by_id(updated.member_id) or updated

    def delete_member(self, member_id: int) -> None:
        """Members with recorded payments cannot be deleted."""
        history = self.payment_repository.find_payments_by_member_id(member_id)
        if history:
            raise InvalidInput(
                f"Member {member_id} has {len(history)} recorded payment(s) and cannot be deleted."
            )
        if not self.repository.delete(member_id):
            raise NotFound(f"Member not found with ID: {member_id}")
        self.repository.reload_members()

    def search_members(self, query: str) -> list[Member]:
        return self.repository.search(query)
