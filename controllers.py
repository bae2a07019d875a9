"""
controllers.py
Request/response shaping for the UI. Validation and lookup failures come back
as a Reply with a message; they are never raised to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

import store
import utils
from errors import IntegrityError, InvalidInput, NotFound
from models import (
    ActivityType,
    Member,
    MembershipStatus,
    MembershipType,
    Payment,
    PaymentStatus,
)
from repositories import MemberRepository
from services import MemberService, PaymentService


@dataclass(frozen=True)
class Reply:
    ok: bool
    message: str
    value: Any = None


def _failed(exc: Exception) -> Reply:
    logger.warning(f"Rejected: {exc}")
    return Reply(False, f"Error: {exc}")


def _parse_int(text, label: str) -> int:
    if isinstance(text, bool):
        raise InvalidInput(f"Invalid {label}: Please enter a whole number.")
    if isinstance(text, int):
        return text
    try:
        return int(str(text).strip())
    except ValueError:
        raise InvalidInput(f"Invalid {label}: Please enter a whole number.") from None


def _coerce_int(text):
    try:
        return _parse_int(text, "number")
    except InvalidInput:
        return text


def _parse_amount(text) -> float:
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return float(text)
    try:
        return float(str(text).strip().replace(",", "."))
    except ValueError:
        raise InvalidInput("Invalid payment amount: Please enter a number.") from None


class PaymentController:
    def __init__(self, payment_service: PaymentService, member_repository: MemberRepository):
        self.payment_service = payment_service
        self.member_repository = member_repository

    def calculate_membership_fee_for_member(self, member_id: int) -> float | None:
        member = self.member_repository.find_by_id(member_id)
        if member is None:
            return None
        return self.payment_service.calculate_membership_fee(member)

    def calculate_total_expected_payments(self) -> float:
        return self.payment_service.calculate_total_expected_payments(self.member_repository.find_all())

    def get_members_paid_list(self) -> list[Member]:
        return self.payment_service.get_members_paid_list(self.member_repository.find_all())

    def get_members_pending_list(self) -> list[Member]:
        return self.payment_service.get_members_pending_list(self.member_repository.find_all())

    def get_members_by_payment_status(self, status) -> Reply:
        try:
            members = self.payment_service.get_members_by_payment_status(
                self.member_repository.find_all(), status
            )
        except InvalidInput as exc:
            return _failed(exc)
        return Reply(True, f"{len(members)} member(s) with payment status {PaymentStatus.parse(status).name}.", members)

    def update_member_payment_status(self, member_id: int, status) -> Reply:
        member = self.member_repository.find_by_id(member_id)
        if member is None:
            return Reply(False, f"Member not found with ID: {member_id}")
        try:
            self.payment_service.update_member_payment_status(member, status)
        except (InvalidInput, NotFound) as exc:
            return _failed(exc)
        return Reply(True, f"Payment status updated for member ID: {member_id}", member)

    def register_payment(self, member_id: int, amount) -> Reply:
        try:
            payment = self.payment_service.register_payment(member_id, _parse_amount(amount))
        except (InvalidInput, NotFound, IntegrityError) as exc:
            return _failed(exc)
        return Reply(True, f"Payment {payment.payment_id} registered for member ID: {member_id}", payment)

    def view_payments_for_member(self, member_id: int) -> Reply:
        if self.member_repository.find_by_id(member_id) is None:
            return Reply(False, f"Member not found with ID: {member_id}")
        payments: list[Payment] = self.payment_service.get_payments_for_member(member_id)
        if not payments:
            return Reply(True, f"No payments found for member ID: {member_id}", payments)
        return Reply(True, f"{len(payments)} payment(s) for member ID: {member_id}", payments)

    def view_payment_summary(self) -> str:
        return self.payment_service.get_payment_summary(self.member_repository.find_all())

    def get_payment_rates(self) -> tuple[float, float]:
        return self.payment_service.get_payment_rates()

    def set_payment_rates(self, junior_rate, senior_rate) -> Reply:
        try:
            self.payment_service.set_payment_rates(_parse_amount(junior_rate), _parse_amount(senior_rate))
        except InvalidInput as exc:
            return _failed(exc)
        return Reply(True, "Payment rates updated.", self.payment_service.get_payment_rates())

    # ---------- Reminders ----------

    def set_payment_reminder(self, member_id: int, message: str) -> Reply:
        try:
            reminder = self.payment_service.set_payment_reminder(member_id, message)
        except (InvalidInput, NotFound) as exc:
            return _failed(exc)
        return Reply(True, "Reminder saved.", reminder)

    def get_all_reminders(self) -> list[str]:
        return self.payment_service.get_all_reminders()

    def remove_reminder(self, reminder: str) -> Reply:
        if self.payment_service.remove_reminder(reminder):
            return Reply(True, "Reminder removed.")
        return Reply(False, "Reminder not found.")

    def clear_reminders(self) -> Reply:
        self.payment_service.clear_reminders()
        return Reply(True, "All reminders cleared.")


class MemberController:
    def __init__(self, member_service: MemberService, member_repository: MemberRepository):
        self.member_service = member_service
        self.member_repository = member_repository

    def _build(self, member_id: int, name, email, city, street, region, zipcode,
               membership_type, membership_status, activity_type, age, phone_number,
               payment_status=PaymentStatus.PENDING) -> Member:
        # Unparseable numbers are handed to the validator as-is so checks keep their order
        age = _coerce_int(age)
        phone_number = _coerce_int(phone_number)
        utils.validate_member_data(name, age, membership_type, email, phone_number)
        for label, text in (("name", name), ("email", email), ("city", city),
                            ("street", street), ("region", region)):
            if store.DELIMITER in str(text):
                raise InvalidInput(f"Invalid {label}: '{store.DELIMITER}' is not allowed.")
        return Member(
            member_id=member_id,
            name=name.strip(),
            email=email.strip(),
            city=city.strip(),
            street=street.strip(),
            region=region.strip(),
            zipcode=_parse_int(zipcode, "zipcode"),
            membership_type=MembershipType.from_string(membership_type),
            membership_status=MembershipStatus.parse(membership_status),
            activity_type=ActivityType.parse(activity_type),
            payment_status=PaymentStatus.parse(payment_status),
            age=age,
            phone_number=phone_number,
        )

    def register_member(self, name, email, city, street, region, zipcode, membership_type,
                        membership_status, activity_type, age, phone_number) -> Reply:
        """New members always start with a PENDING payment status."""
        try:
            member = self._build(0, name, email, city, street, region, zipcode, membership_type,
                                 membership_status, activity_type, age, phone_number)
            member = self.member_service.register_member(member)
        except InvalidInput as exc:
            return _failed(exc)
        return Reply(True, f"Member registered successfully with ID: {member.member_id}", member)

    def update_member(self, member_id: int, name, email, city, street, region, zipcode,
                      membership_type, membership_status, activity_type, age, phone_number) -> Reply:
        existing = self.member_repository.find_by_id(member_id)
        if existing is None:
            return Reply(False, f"Member not found with ID: {member_id}")
        try:
            changes = self._build(member_id, name, email, city, street, region, zipcode,
                                  membership_type, membership_status, activity_type, age,
                                  phone_number, payment_status=existing.payment_status)
            member = self.member_service.update_member(changes)
        except (InvalidInput, NotFound) as exc:
            return _failed(exc)
        return Reply(True, f"Member {member_id} updated successfully.", member)

    def delete_member(self, member_id: int) -> Reply:
        try:
            self.member_service.delete_member(member_id)
        except (InvalidInput, NotFound) as exc:
            return _failed(exc)
        return Reply(True, f"Member {member_id} deleted successfully.")

    def find_member_by_id(self, member_id: int) -> Member | None:
        return self.member_repository.find_by_id(member_id)

    def view_all_members(self) -> list[str]:
        return [
            f"ID: {m.member_id}, Name: {m.name}, Membership: {m.membership_description}, "
            f"Status: {m.membership_status.name}, Activity: {m.activity_type.name}, "
            f"Payment: {m.payment_status.name}"
            for m in self.member_repository.find_all()
        ]

    def search_members(self, query: str) -> list[Member]:
        return self.member_service.search_members(query)
