"""
Member and payment repository tests
"""

from datetime import date

import pytest

from conftest import make_member
from errors import IntegrityError, NotFound
from models import MembershipStatus, Payment, PaymentStatus
from repositories import MemberRepository, PaymentRepository


class TestMemberRepository:
    def test_next_id_empty(self, member_repository):
        assert member_repository.get_next_member_id() == 1

    def test_next_id_is_max_plus_one(self, member_repository):
        member_repository.save(make_member(member_id=1, name="Alice"))
        member_repository.save(make_member(member_id=3, name="Bob"))
        assert member_repository.get_next_member_id() == 4

    def test_next_id_follows_deletion(self, member_repository):
        member_repository.save(make_member(member_id=1, name="Alice"))
        member_repository.save(make_member(member_id=2, name="Bob"))
        assert member_repository.delete(2) is True
        assert member_repository.get_next_member_id() == 2

    def test_find_by_id_missing_returns_none(self, member_repository):
        assert member_repository.find_by_id(42) is None

    def test_save_rewrites_whole_store(self, member_repository):
        member_repository.save(make_member(member_id=1, name="Alice"))
        member_repository.save(make_member(member_id=2, name="Bob"))
        lines = member_repository.file_path.read_text(encoding="utf-8").splitlines()
        assert [line.split(";")[1] for line in lines] == ["Alice", "Bob"]

    def test_round_trip_through_store(self, member_repository):
        for i, (name, age) in enumerate([("Alice", 30), ("Bob", 12), ("Carla", 64)], start=1):
            member_repository.save(make_member(member_id=i, name=name, age=age))
        reloaded = MemberRepository(member_repository.file_path)
        key = lambda m: (m.member_id, m.name, m.age, m.membership_type)  # noqa: E731
        assert sorted(map(key, reloaded.find_all()), key=str) == sorted(
            map(key, member_repository.find_all()), key=str
        )

    def test_update_is_in_place(self, member_repository):
        tracked = make_member(member_id=1, name="Alice")
        member_repository.save(tracked)
        changes = make_member(member_id=1, name="Alicia", age=31)
        result = member_repository.update(changes)
        assert result is tracked
        assert tracked.name == "Alicia"
        assert tracked.age == 31
        assert MemberRepository(member_repository.file_path).find_by_id(1).name == "Alicia"

    def test_update_unknown_id_raises(self, member_repository):
        with pytest.raises(NotFound):
            member_repository.update(make_member(member_id=99))

    def test_reload_discards_memory_state(self, member_repository):
        member = make_member(member_id=1, name="Alice")
        member_repository.save(member)
        member.name = "Changed in memory"
        member_repository.reload_members()
        assert member_repository.find_by_id(1).name == "Alice"

    def test_reload_keeps_members_held_by_payments(self, member_repository, payment_repository):
        member = make_member(member_id=1, name="Alice")
        member_repository.save(member)
        payment = Payment(1, PaymentStatus.COMPLETE, member, date(2024, 11, 25), 1600)
        payment_repository.save(payment)

        member.name = "Alice Jensen"
        member_repository.update(member)
        member_repository.reload_members()
        member_repository.find_by_id(1).payment_status = PaymentStatus.FAILED

        assert member_repository.find_by_id(1) is payment.member
        assert payment.member.name == "Alice Jensen"
        assert payment.member.payment_status == PaymentStatus.FAILED

    def test_reload_drops_members_removed_from_store(self, member_repository, data_dir):
        member_repository.save(make_member(member_id=1, name="Alice"))
        member_repository.save(make_member(member_id=2, name="Bob"))
        (data_dir / "members.dat").write_text(make_member(member_id=2, name="Bob").to_record() + "\n", encoding="utf-8")
        member_repository.reload_members()
        assert [m.member_id for m in member_repository.find_all()] == [2]

    def test_find_all_is_live(self, member_repository):
        member_repository.save(make_member(member_id=1))
        assert member_repository.find_all() is member_repository.members

    def test_delete_missing_returns_false(self, member_repository):
        assert member_repository.delete(5) is False

    def test_invalid_lines_are_skipped(self, data_dir):
        path = data_dir / "members.dat"
        good = make_member(member_id=1, name="Alice").to_record()
        bad_phone = make_member(member_id=2, name="Bob", phone_number=123).to_record()
        path.write_text("\n".join([good, "garbage", bad_phone]) + "\n", encoding="utf-8")
        repo = MemberRepository(path)
        assert [m.member_id for m in repo.find_all()] == [1]

    def test_search(self, member_repository):
        member_repository.save(make_member(member_id=1, name="Alice", phone_number=11112222))
        member_repository.save(make_member(member_id=2, name="Bob", phone_number=33334444))
        assert [m.name for m in member_repository.search("ali")] == ["Alice"]
        assert [m.name for m in member_repository.search("2")] == ["Alice", "Bob"]
        assert [m.name for m in member_repository.search("3333")] == ["Bob"]
        assert member_repository.search("  ") == []


class TestPaymentRepository:
    def _payment(self, payment_id, member, amount=1600):
        return Payment(payment_id, PaymentStatus.COMPLETE, member, date(2024, 11, 25), amount)

    def test_next_id_is_count_plus_one(self, payment_repository):
        assert payment_repository.get_next_payment_id() == 1
        payment_repository.save(self._payment(1, make_member()))
        payment_repository.save(self._payment(5, make_member()))
        assert payment_repository.get_next_payment_id() == 3

    def test_save_does_not_persist(self, payment_repository, data_dir):
        payment_repository.save(self._payment(1, make_member()))
        assert not (data_dir / "payments.dat").exists()

    def test_duplicate_id_ignored(self, payment_repository):
        assert payment_repository.save(self._payment(1, make_member(), 100)) is True
        assert payment_repository.save(self._payment(1, make_member(), 200)) is False
        assert [p.amount_per_year for p in payment_repository.find_all()] == [100.0]

    def test_save_none_raises(self, payment_repository):
        with pytest.raises(ValueError):
            payment_repository.save(None)

    def test_find_by_member_in_insertion_order(self, payment_repository):
        alice, bob = make_member(member_id=1), make_member(member_id=2, name="Bob")
        payment_repository.save(self._payment(1, alice, 100))
        payment_repository.save(self._payment(2, bob, 200))
        payment_repository.save(self._payment(3, alice, 300))
        assert [p.payment_id for p in payment_repository.find_payments_by_member_id(1)] == [1, 3]

    def test_find_all_is_a_copy(self, payment_repository):
        payment_repository.save(self._payment(1, make_member()))
        payment_repository.find_all().clear()
        assert len(payment_repository.find_all()) == 1

    def test_write_and_load_payments(self, payment_repository, member_repository, data_dir):
        member = make_member(member_id=1, payment_status=PaymentStatus.PENDING)
        member_repository.save(member)
        payment_repository.save(self._payment(1, member))
        path = data_dir / "payments.dat"
        payment_repository.write_payments(path)

        fresh_members = MemberRepository(member_repository.file_path)
        fresh = PaymentRepository(data_dir / "reminders.dat")
        assert fresh.load_payments(path, fresh_members) == 1
        loaded = fresh.find_all()[0]
        assert loaded.member is fresh_members.find_by_id(1)
        assert loaded.amount_per_year == 1600.0
        assert loaded.member.payment_status == PaymentStatus.COMPLETE

    def test_dangling_member_reference_is_an_error(self, payment_repository, member_repository, data_dir):
        path = data_dir / "payments.dat"
        path.write_text("1;77;1600.0;2024-11-25;COMPLETE\n", encoding="utf-8")
        with pytest.raises(IntegrityError):
            payment_repository.load_payments(path, member_repository)

    def test_malformed_payment_line_skipped(self, payment_repository, member_repository, data_dir):
        member_repository.save(make_member(member_id=1, membership_status=MembershipStatus.ACTIVE))
        path = data_dir / "payments.dat"
        path.write_text("1;1;abc;2024-11-25;COMPLETE\n2;1;500.0;2024-11-26;COMPLETE\n", encoding="utf-8")
        assert payment_repository.load_payments(path, member_repository) == 1


class TestReminders:
    def test_save_get_remove(self, payment_repository):
        payment_repository.save_reminder("Member ID 1: pay now")
        assert payment_repository.get_reminders() == ["Member ID 1: pay now"]
        assert payment_repository.remove_reminder("Member ID 1: pay now") is True
        assert payment_repository.get_reminders() == []

    def test_remove_missing_returns_false(self, payment_repository):
        assert payment_repository.remove_reminder("never added") is False

    def test_reminders_persist(self, payment_repository, data_dir):
        payment_repository.save_reminder("first reminder")
        payment_repository.save_reminder("second reminder")
        reopened = PaymentRepository(data_dir / "reminders.dat")
        assert reopened.get_reminders() == ["first reminder", "second reminder"]

    def test_clear(self, payment_repository, data_dir):
        payment_repository.save_reminder("first reminder")
        payment_repository.clear_reminders()
        assert payment_repository.get_reminders() == []
        assert PaymentRepository(data_dir / "reminders.dat").get_reminders() == []

    def test_get_reminders_is_a_copy(self, payment_repository):
        payment_repository.save_reminder("first reminder")
        payment_repository.get_reminders().append("sneaky")
        assert payment_repository.get_reminders() == ["first reminder"]
