"""
models.py
Domain types: membership enums, Member, Payment and their store record shapes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from errors import InvalidInput
from store import join_record, split_record

# Members younger than this are created as the junior variant
JUNIOR_AGE_LIMIT = 18

MEMBER_FIELD_COUNT = 13
PAYMENT_FIELD_COUNT = 5


class _Choice(str, Enum):
    """String enum with forgiving parsing (case and surrounding spaces)."""

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().upper()
        try:
            return cls[text]
        except KeyError:
            choices = ", ".join(m.name for m in cls)
            raise InvalidInput(f"Invalid {cls.__name__}: '{value}'. Must be one of {choices}.") from None

    @property
    def label(self) -> str:
        return self.name.capitalize()


class MembershipCategory(_Choice):
    COMPETITIVE = "COMPETITIVE"
    EXERCISE = "EXERCISE"


class MembershipLevel(_Choice):
    JUNIOR = "JUNIOR"
    SENIOR = "SENIOR"


class MembershipStatus(_Choice):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"


class PaymentStatus(_Choice):
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


class ActivityType(_Choice):
    CRAWL = "CRAWL"
    BREASTSTROKE = "BREASTSTROKE"
    BUTTERFLY = "BUTTERFLY"
    BACKCRAWL = "BACKCRAWL"


class MemberKind(_Choice):
    JUNIOR = "JUNIOR"
    SENIOR = "SENIOR"

    @classmethod
    def for_age(cls, age: int) -> "MemberKind":
        return cls.JUNIOR if age < JUNIOR_AGE_LIMIT else cls.SENIOR


@dataclass
class MembershipType:
    category: MembershipCategory
    level: MembershipLevel

    @classmethod
    def from_string(cls, text: str) -> "MembershipType":
        """
        Parse "Senior Competitive", "SENIOR COMPETITIVE" or "Junior exercise Swimmer".
        Level comes first, category second.
        """
        if isinstance(text, MembershipType):
            return text
        words = str(text or "").split()
        if words and words[-1].lower() == "swimmer":
            words = words[:-1]
        if len(words) != 2:
            raise InvalidInput(f"Invalid membership type format: '{text}'.")
        level = MembershipLevel.parse(words[0])
        category = MembershipCategory.parse(words[1])
        return cls(category=category, level=level)

    def encode(self) -> str:
        return f"{self.level.name} {self.category.name}"

    def __str__(self) -> str:
        return f"{self.level.label} {self.category.label} Swimmer"


@dataclass
class Member:
    member_id: int
    name: str
    email: str
    city: str
    street: str
    region: str
    zipcode: int
    membership_type: MembershipType
    membership_status: MembershipStatus
    activity_type: ActivityType
    payment_status: PaymentStatus
    age: int
    phone_number: int
    # Fixed at construction; later age updates do not move a member between variants
    kind: MemberKind | None = field(default=None)

    def __post_init__(self) -> None:
        if self.kind is None:
            self.kind = MemberKind.for_age(self.age)

    @property
    def membership_description(self) -> str:
        return f"{self.kind.label} Member: {self.membership_type}"

    def to_record(self) -> str:
        fields = [
            self.member_id,
            self.name,
            self.email,
            self.city,
            self.street,
            self.region,
            self.zipcode,
            self.membership_type.encode(),
            self.membership_status.name,
            self.activity_type.name,
            self.payment_status.name,
            self.age,
            self.phone_number,
        ]
        return join_record(fields)

    @classmethod
    def from_record(cls, line: str) -> "Member":
        parts = split_record(line.rstrip("\n"))
        if len(parts) != MEMBER_FIELD_COUNT:
            raise InvalidInput(f"Expected {MEMBER_FIELD_COUNT} fields, got {len(parts)}.")
        try:
            member_id = int(parts[0])
            zipcode = int(parts[6])
            age = int(parts[11])
            phone_number = int(parts[12])
        except ValueError as exc:
            raise InvalidInput(f"Non-numeric field: {exc}") from None
        return cls(
            member_id=member_id,
            name=parts[1],
            email=parts[2],
            city=parts[3],
            street=parts[4],
            region=parts[5],
            zipcode=zipcode,
            membership_type=MembershipType.from_string(parts[7]),
            membership_status=MembershipStatus.parse(parts[8]),
            activity_type=ActivityType.parse(parts[9]),
            payment_status=PaymentStatus.parse(parts[10]),
            age=age,
            phone_number=phone_number,
        )


@dataclass
class Payment:
    payment_id: int
    payment_status: PaymentStatus
    member: Member
    payment_date: date
    amount_per_year: float

    def __post_init__(self) -> None:
        if self.member is None:
            raise TypeError("Member cannot be None.")
        if self.payment_date is None:
            raise TypeError("Payment date cannot be None.")
        self.amount_per_year = _positive_amount(self.amount_per_year)

    def set_amount_per_year(self, amount: float) -> None:
        self.amount_per_year = _positive_amount(amount)

    def set_payment_date(self, payment_date: date) -> None:
        if payment_date is None:
            raise TypeError("Payment date cannot be None.")
        self.payment_date = payment_date

    def set_payment_status(self, status: PaymentStatus | str) -> None:
        self.payment_status = PaymentStatus.parse(status)

    def to_record(self) -> str:
        fields = [
            self.payment_id,
            self.member.member_id,
            float(self.amount_per_year),
            self.payment_date.isoformat(),
            self.payment_status.name,
        ]
        return join_record(fields)


def _positive_amount(amount) -> float:
    if amount <= 0:
        raise InvalidInput("Amount per year must be positive.")
    return float(amount)
