"""
Pytest configuration and fixtures for the swim club ledger tests
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (  # noqa: E402
    ActivityType,
    Member,
    MembershipCategory,
    MembershipLevel,
    MembershipStatus,
    MembershipType,
    PaymentStatus,
)
from repositories import MemberRepository, PaymentRepository  # noqa: E402
from services import MemberService, PaymentService  # noqa: E402


def make_member(
    member_id=1,
    name="Alice",
    age=30,
    membership_status=MembershipStatus.ACTIVE,
    payment_status=PaymentStatus.PENDING,
    level=MembershipLevel.SENIOR,
    category=MembershipCategory.COMPETITIVE,
    phone_number=12345678,
):
    return Member(
        member_id=member_id,
        name=name,
        email=f"{name.lower()}@example.com",
        city="Herning",
        street="Hansensvej 2",
        region="Midtjylland",
        zipcode=7400,
        membership_type=MembershipType(category, level),
        membership_status=membership_status,
        activity_type=ActivityType.CRAWL,
        payment_status=payment_status,
        age=age,
        phone_number=phone_number,
    )


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path


@pytest.fixture
def member_repository(data_dir):
    return MemberRepository(data_dir / "members.dat")


@pytest.fixture
def payment_repository(data_dir):
    return PaymentRepository(data_dir / "reminders.dat")


@pytest.fixture
def payment_service(data_dir, payment_repository, member_repository):
    return PaymentService(
        payment_repository, member_repository, data_dir / "payments.dat", data_dir / "paymentRates.dat"
    )


@pytest.fixture
def member_service(member_repository, payment_repository):
    return MemberService(member_repository, payment_repository)
