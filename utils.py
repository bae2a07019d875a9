"""
utils.py
Validation, dates, amount formatting and CSV exports.
"""

from __future__ import annotations

import math
from datetime import date

import pandas as pd

from errors import InvalidInput
from models import Member, MembershipType, Payment, PaymentStatus

MIN_AGE = 0
MAX_AGE = 120
PHONE_DIGITS = 8
REMINDER_MIN_LENGTH = 5
REMINDER_MAX_LENGTH = 255


def today_iso() -> str:
    return date.today().isoformat()


def parse_iso(d: str) -> date:
    return date.fromisoformat(d)


def format_dkk(amount: float) -> str:
    """1600.0 -> '1600', 1234.5 -> '1234.50'."""
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    return f"{amount:.2f}"


# ---------- Predicates ----------

def is_valid_name(name) -> bool:
    return isinstance(name, str) and bool(name.strip())


def is_valid_age(age) -> bool:
    if isinstance(age, bool) or not isinstance(age, int):
        return False
    return MIN_AGE <= age <= MAX_AGE


def is_valid_membership_type(membership_type) -> bool:
    try:
        MembershipType.from_string(membership_type)
    except InvalidInput:
        return False
    return True


def is_valid_email(email) -> bool:
    return isinstance(email, str) and "@" in email


def is_valid_phone_number(phone_number) -> bool:
    # Digit count of the numeric value: "01234567" is 1234567, seven digits
    if isinstance(phone_number, bool):
        return False
    if isinstance(phone_number, str):
        text = phone_number.strip()
        if not text.isdigit():
            return False
        phone_number = int(text)
    if not isinstance(phone_number, int):
        return False
    if phone_number < 0:
        return False
    return len(str(phone_number)) == PHONE_DIGITS


def is_valid_payment_amount(amount) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    return math.isfinite(amount) and amount > 0


# ---------- Contracts ----------

def validate_member_data(name, age, membership_type, email, phone_number) -> None:
    """
    Raise InvalidInput for the first failing check.
    Order: name, age, membership type, email, phone number.
    """
    if not is_valid_name(name):
        raise InvalidInput("Invalid name: Name cannot be empty.")
    if not is_valid_age(age):
        raise InvalidInput(f"Invalid age: Age must be between {MIN_AGE} and {MAX_AGE}.")
    if not is_valid_membership_type(membership_type):
        raise InvalidInput(
            "Invalid membership type: Level must be 'junior' or 'senior' "
            "and category must be 'competitive' or 'exercise'."
        )
    if not is_valid_email(email):
        raise InvalidInput("Invalid email: Email must contain '@'.")
    if not is_valid_phone_number(phone_number):
        raise InvalidInput(f"Invalid phone number: Phone number must be {PHONE_DIGITS} digits.")


def validate_member(member: Member) -> None:
    validate_member_data(
        member.name, member.age, member.membership_type, member.email, member.phone_number
    )


def validate_payment(amount, status=PaymentStatus.COMPLETE) -> None:
    if not is_valid_payment_amount(amount):
        raise InvalidInput("Invalid payment amount: Amount must be greater than 0.")
    PaymentStatus.parse(status)


def validate_reminder(text) -> None:
    if (
        not isinstance(text, str)
        or not text.strip()
        or not REMINDER_MIN_LENGTH <= len(text) <= REMINDER_MAX_LENGTH
    ):
        raise InvalidInput(
            f"Invalid reminder: Reminder must be between {REMINDER_MIN_LENGTH} "
            f"and {REMINDER_MAX_LENGTH} characters long."
        )


# ---------- Exports ----------

MEMBER_COLUMNS = [
    "member_id", "name", "email", "age", "phone_number", "membership",
    "membership_status", "activity_type", "payment_status",
]
PAYMENT_COLUMNS = ["payment_id", "member_id", "name", "amount", "date", "status"]


def members_frame(members: list[Member]) -> pd.DataFrame:
    rows = [
        {
            "member_id": m.member_id,
            "name": m.name,
            "email": m.email,
            "age": m.age,
            "phone_number": m.phone_number,
            "membership": m.membership_description,
            "membership_status": m.membership_status.name,
            "activity_type": m.activity_type.name,
            "payment_status": m.payment_status.name,
        }
        for m in members
    ]
    return pd.DataFrame(rows, columns=MEMBER_COLUMNS)


def payments_frame(payments: list[Payment]) -> pd.DataFrame:
    rows = [
        {
            "payment_id": p.payment_id,
            "member_id": p.member.member_id,
            "name": p.member.name,
            "amount": p.amount_per_year,
            "date": p.payment_date.isoformat(),
            "status": p.payment_status.name,
        }
        for p in payments
    ]
    return pd.DataFrame(rows, columns=PAYMENT_COLUMNS)


def members_to_csv_bytes(members: list[Member]) -> bytes:
    return members_frame(members).to_csv(index=False).encode("utf-8")


def payments_to_csv_bytes(payments: list[Payment]) -> bytes:
    return payments_frame(payments).to_csv(index=False).encode("utf-8")


def revenue_summary_by_month(payments: list[Payment]) -> pd.DataFrame:
    df = payments_frame(payments)
    if df.empty:
        return pd.DataFrame(columns=["month", "revenue"])
    df["month"] = df["date"].str.slice(0, 7)
    summary = df.groupby("month", as_index=False)["amount"].sum()
    summary = summary.rename(columns={"amount": "revenue"})
    return summary.sort_values("month", ascending=False).reset_index(drop=True)
