"""
repositories.py
In-memory collections of members and payments, each bound to its own flat-file store.
"""

from __future__ import annotations

import threading
from datetime import date
from pathlib import Path

from loguru import logger

import store
import utils
from errors import IntegrityError, InvalidInput, NotFound
from models import PAYMENT_FIELD_COUNT, Member, Payment, PaymentStatus

# Attributes copied onto the tracked member by MemberRepository.update
MEMBER_FIELDS = (
    "name",
    "email",
    "city",
    "street",
    "region",
    "zipcode",
    "membership_type",
    "membership_status",
    "activity_type",
    "payment_status",
    "age",
    "phone_number",
)


class MemberRepository:
    """
    Sole authority for member identity. Every mutation rewrites the whole store.
    """

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)
        self._lock = threading.RLock()
        self.members: list[Member] = self._load()

    def _load(self) -> list[Member]:
        members = []
        for line in store.read_lines(self.file_path):
            try:
                member = Member.from_record(line)
                utils.validate_member(member)
            except InvalidInput as exc:
                logger.error(f"Skipping invalid member record '{line}': {exc}")
                continue
            members.append(member)
        return members

    def _persist(self) -> bool:
        return store.write_lines(self.file_path, [m.to_record() for m in self.members])

    def reload_members(self) -> None:
        """
        Re-read the store. Members that are still present keep their object
        identity, so payments holding them see the reloaded fields.
        """
        with self._lock:
            tracked = {m.member_id: m for m in self.members}
            members = []
            for member in self._load():
                existing = tracked.get(member.member_id)
                if existing is not None:
                    for name in MEMBER_FIELDS + ("kind",):
                        setattr(existing, name, getattr(member, name))
                    member = existing
                members.append(member)
            self.members = members
        logger.debug(f"Reloaded {len(self.members)} members from {self.file_path}")

    def get_next_member_id(self) -> int:
        with self._lock:
            return max((m.member_id for m in self.members), default=0) + 1

    def find_by_id(self, member_id: int) -> Member | None:
        with self._lock:
            return next((m for m in self.members if m.member_id == member_id), None)

    def find_all(self) -> list[Member]:
        return self.members

    def save(self, member: Member) -> None:
        with self._lock:
            self.members.append(member)
            self._persist()
        logger.info(f"Member {member.member_id} ({member.name}) saved")

    def update(self, member: Member) -> Member:
        with self._lock:
            existing = self.find_by_id(member.member_id)
            if existing is None:
                raise NotFound(f"Member not found with ID: {member.member_id}")
            if existing is not member:
                for name in MEMBER_FIELDS:
                    setattr(existing, name, getattr(member, name))
            self._persist()
        logger.info(f"Member {existing.member_id} updated")
        return existing

    def delete(self, member_id: int) -> bool:
        with self._lock:
            member = self.find_by_id(member_id)
            if member is None:
                return False
            self.members.remove(member)
            self._persist()
        logger.info(f"Member {member_id} deleted")
        return True

    def search(self, query: str) -> list[Member]:
        """Match on exact id, name substring (case-insensitive) or phone digits."""
        text = str(query or "").strip()
        if not text:
            return []
        needle = text.lower()
        with self._lock:
            return [
                m
                for m in self.members
                if str(m.member_id) == text
                or needle in m.name.lower()
                or (text.isdigit() and text in str(m.phone_number))
            ]


class PaymentRepository:
    """
    Payment history plus the free-text reminder bag.
    Payments are persisted by the caller; reminders persist on every change.
    """

    def __init__(self, reminder_file_path: str | Path):
        self.reminder_file_path = Path(reminder_file_path)
        self._lock = threading.RLock()
        self.payments: list[Payment] = []
        self.reminders: list[str] = store.read_lines(self.reminder_file_path)

    # ---------- Payments ----------

    def get_next_payment_id(self) -> int:
        # count + 1: payments are never deleted
        with self._lock:
            return len(self.payments) + 1

    def save(self, payment: Payment) -> bool:
        """Add payment to the history. Returns False if its id is already taken."""
        if payment is None:
            raise ValueError("Payment cannot be None.")
        with self._lock:
            if any(p.payment_id == payment.payment_id for p in self.payments):
                logger.warning(f"Duplicate payment attempt for payment ID: {payment.payment_id}")
                return False
            self.payments.append(payment)
        logger.info(f"Payment {payment.payment_id} added for member {payment.member.member_id}")
        return True

    def find_payments_by_member_id(self, member_id: int) -> list[Payment]:
        with self._lock:
            return [p for p in self.payments if p.member.member_id == member_id]

    def find_all(self) -> list[Payment]:
        with self._lock:
            return list(self.payments)

    def write_payments(self, file_path: str | Path) -> bool:
        with self._lock:
            return store.write_lines(file_path, [p.to_record() for p in self.payments])

    def load_payments(self, file_path: str | Path, member_repository: MemberRepository) -> int:
        """
        Read the payment store, resolving each member id against member_repository.
        A payment pointing at an unknown member raises IntegrityError.
        Each loaded payment's status is copied onto its member.
        """
        loaded = []
        for line in store.read_lines(file_path):
            try:
                payment_id, member_id, amount, paid_on, status = self._parse(line)
            except (InvalidInput, ValueError) as exc:
                logger.error(f"Skipping invalid payment record '{line}': {exc}")
                continue
            member = member_repository.find_by_id(member_id)
            if member is None:
                raise IntegrityError(
                    f"Payment {payment_id} in {file_path} refers to unknown member ID {member_id}"
                )
            loaded.append(Payment(payment_id, status, member, paid_on, amount))

        with self._lock:
            for payment in loaded:
                if self.save(payment):
                    payment.member.payment_status = payment.payment_status
        logger.info(f"Loaded {len(loaded)} payments from {file_path}")
        return len(loaded)

    @staticmethod
    def _parse(line: str):
        parts = store.split_record(line)
        if len(parts) != PAYMENT_FIELD_COUNT:
            raise InvalidInput(f"Expected {PAYMENT_FIELD_COUNT} fields, got {len(parts)}.")
        amount = float(parts[2])
        if amount <= 0:
            raise InvalidInput("Amount per year must be positive.")
        return (
            int(parts[0]),
            int(parts[1]),
            amount,
            date.fromisoformat(parts[3]),
            PaymentStatus.parse(parts[4]),
        )

    # ---------- Reminders ----------

    def _persist_reminders(self) -> bool:
        return store.write_lines(self.reminder_file_path, self.reminders)

    def save_reminder(self, reminder: str) -> None:
        if not reminder or not reminder.strip():
            raise InvalidInput("Reminder cannot be empty.")
        with self._lock:
            self.reminders.append(reminder)
            self._persist_reminders()
        logger.info(f"Reminder saved: {reminder}")

    def get_reminders(self) -> list[str]:
        with self._lock:
            return list(self.reminders)

    def remove_reminder(self, reminder: str) -> bool:
        with self._lock:
            if reminder not in self.reminders:
                return False
            self.reminders.remove(reminder)
            self._persist_reminders()
        logger.info(f"Reminder removed: {reminder}")
        return True

    def clear_reminders(self) -> None:
        with self._lock:
            self.reminders.clear()
            self._persist_reminders()
        logger.info("All reminders cleared")
