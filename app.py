"""
app.py
Streamlit Swim Club treasurer dashboard.
Run: streamlit run app.py
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st
from loguru import logger

import auth
import config
import utils
from controllers import MemberController, PaymentController
from errors import IntegrityError
from models import ActivityType, MembershipCategory, MembershipLevel, MembershipStatus, PaymentStatus
from repositories import MemberRepository, PaymentRepository
from services import MemberService, PaymentService

st.set_page_config(page_title="Swim Club Ledger", layout="wide")


@dataclass
class Club:
    members: MemberController
    payments: PaymentController
    payment_repository: PaymentRepository


@st.cache_resource
def load_club() -> Club:
    """One set of repositories per process, loaded from the stores on first use."""
    config.configure_logging()
    auth.ensure_default_user(config.USERS_FILE)

    member_repository = MemberRepository(config.MEMBERS_FILE)
    payment_repository = PaymentRepository(config.REMINDERS_FILE)
    payment_repository.load_payments(config.PAYMENTS_FILE, member_repository)

    payment_service = PaymentService(
        payment_repository, member_repository, config.PAYMENTS_FILE, config.RATES_FILE
    )
    member_service = MemberService(member_repository, payment_repository)
    logger.info(f"Club ledger loaded from {config.DATA_DIR}")
    return Club(
        members=MemberController(member_service, member_repository),
        payments=PaymentController(payment_service, member_repository),
        payment_repository=payment_repository,
    )


def show(reply) -> None:
    if reply.ok:
        st.success(reply.message)
    else:
        st.error(reply.message)


def require_login():
    if "logged_in" not in st.session_state:
        st.session_state.logged_in = False
    if "username" not in st.session_state:
        st.session_state.username = None


def logout():
    st.session_state.logged_in = False
    st.session_state.username = None
    st.success("Logged out.")


def login_screen():
    st.title("🔐 Treasurer Login")

    col1, col2 = st.columns([1, 1])
    with col1:
        username = st.text_input("Username", value=auth.DEFAULT_USERNAME)
        password = st.text_input("Password", type="password")
        if st.button("Login", type="primary"):
            if auth.login(config.USERS_FILE, username.strip(), password):
                st.session_state.logged_in = True
                st.session_state.username = username.strip()
                st.rerun()
            else:
                st.error("Invalid username or password.")

    with col2:
        st.info(
            "First run creates a default admin:\n\n"
            f"- username: **{auth.DEFAULT_USERNAME}**\n"
            f"- password: **{auth.DEFAULT_PASSWORD}**\n\n"
            "You will be forced to change it on first login."
        )


def password_form(button_label: str):
    p1 = st.text_input("New password", type="password")
    p2 = st.text_input("Confirm new password", type="password")
    if st.button(button_label, type="primary"):
        if len(p1) < auth.MIN_PASSWORD_LENGTH:
            st.error(f"Password must be at least {auth.MIN_PASSWORD_LENGTH} characters.")
        elif p1 != p2:
            st.error("Passwords do not match.")
        elif auth.change_password(config.USERS_FILE, st.session_state.username, p1):
            st.success("Password updated.")
            st.rerun()
        else:
            st.error("Password could not be saved.")


def force_change_password_screen():
    st.title("⚠️ Change Password (Required)")
    st.warning("You must change the default password before using the app.")
    password_form("Update password")


# ---------- Pages ----------

def dashboard_page(club: Club):
    st.header("📊 Dashboard")

    paid = club.payments.get_members_paid_list()
    pending = club.payments.get_members_pending_list()
    expected = club.payments.calculate_total_expected_payments()

    c1, c2, c3 = st.columns(3)
    c1.metric("Members paid", len(paid))
    c2.metric("Members pending", len(pending))
    c3.metric("Total expected (DKK)", utils.format_dkk(expected))

    st.divider()
    st.subheader("Payment summary")
    st.code(club.payments.view_payment_summary())

    st.subheader("Pending members")
    if pending:
        df = utils.members_frame(pending)
        df["fee"] = [club.payments.calculate_membership_fee_for_member(m.member_id) for m in pending]
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.caption("No pending members.")


MEMBERSHIP_TYPES = [
    f"{level.label} {category.label}" for level in MembershipLevel for category in MembershipCategory
]


def member_form(club: Club, existing=None):
    if existing:
        st.subheader(f"✏️ Edit Member (ID: {existing.member_id})")
    else:
        st.subheader("➕ Register Member")

    col1, col2, col3 = st.columns(3)
    with col1:
        name = st.text_input("Name", value=(existing.name if existing else ""))
        email = st.text_input("Email", value=(existing.email if existing else ""))
        phone = st.text_input("Phone (8 digits)", value=(str(existing.phone_number) if existing else ""))
        age = st.text_input("Age", value=(str(existing.age) if existing else ""))

    with col2:
        city = st.text_input("City", value=(existing.city if existing else ""))
        street = st.text_input("Street", value=(existing.street if existing else ""))
        region = st.text_input("Region", value=(existing.region if existing else ""))
        zipcode = st.text_input("Zipcode", value=(str(existing.zipcode) if existing else ""))

    with col3:
        current_type = (
            f"{existing.membership_type.level.label} {existing.membership_type.category.label}"
            if existing else MEMBERSHIP_TYPES[0]
        )
        membership_type = st.selectbox(
            "Membership type", MEMBERSHIP_TYPES, index=MEMBERSHIP_TYPES.index(current_type)
        )
        statuses = [s.name for s in MembershipStatus]
        membership_status = st.selectbox(
            "Membership status", statuses,
            index=(statuses.index(existing.membership_status.name) if existing else 0),
        )
        activities = [a.name for a in ActivityType]
        activity_type = st.selectbox(
            "Activity", activities,
            index=(activities.index(existing.activity_type.name) if existing else 0),
        )

    if st.button("Save", type="primary"):
        if existing:
            reply = club.members.update_member(
                existing.member_id, name, email, city, street, region, zipcode,
                membership_type, membership_status, activity_type, age, phone,
            )
        else:
            reply = club.members.register_member(
                name, email, city, street, region, zipcode,
                membership_type, membership_status, activity_type, age, phone,
            )
        show(reply)
        if reply.ok and not existing:
            fee = club.payments.calculate_membership_fee_for_member(reply.value.member_id)
            st.info(f"Yearly fee: {utils.format_dkk(fee)} DKK")


def members_page(club: Club):
    st.header("👥 Members")

    with st.sidebar:
        st.subheader("Search")
        search = st.text_input("Search (id/name/phone)")

    members = club.members.search_members(search) if search.strip() else club.members.member_repository.find_all()
    st.dataframe(utils.members_frame(members), use_container_width=True, hide_index=True)

    st.divider()

    colA, colB = st.columns([1, 2])
    with colA:
        st.subheader("Select member")
        selected_id = st.selectbox("Member ID", options=["(none)"] + [str(m.member_id) for m in members])

    with colB:
        if selected_id != "(none)":
            st.subheader("Member actions")
            c1, c2, c3 = st.columns(3)
            with c1:
                if st.button("Edit"):
                    st.session_state.edit_member_id = int(selected_id)
                    st.rerun()
            with c2:
                if st.button("View payments"):
                    st.session_state.payments_member_id = int(selected_id)
                    st.session_state.page = "Payments"
                    st.rerun()
            with c3:
                delete_confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
                if st.button("Delete", type="secondary", disabled=not delete_confirm):
                    show(club.members.delete_member(int(selected_id)))

    st.divider()

    if st.session_state.get("edit_member_id"):
        existing = club.members.find_member_by_id(st.session_state.edit_member_id)
        if existing:
            member_form(club, existing=existing)
        if st.button("Cancel edit"):
            st.session_state.edit_member_id = None
            st.rerun()
    else:
        member_form(club, existing=None)


def payments_page(club: Club):
    st.header("💳 Payments")

    members = club.members.member_repository.find_all()
    if not members:
        st.info("No members yet. Register a member first.")
        return

    options = {f"{m.name} ({m.phone_number}) - ID {m.member_id}": m.member_id for m in members}
    labels = list(options.keys())
    default_member_id = st.session_state.get("payments_member_id", members[0].member_id)
    default_index = next((i for i, k in enumerate(labels) if options[k] == default_member_id), 0)
    chosen_label = st.selectbox("Member", labels, index=default_index)
    member_id = options[chosen_label]
    st.session_state.payments_member_id = member_id

    fee = club.payments.calculate_membership_fee_for_member(member_id)
    st.caption(f"Yearly fee for this member: {utils.format_dkk(fee)} DKK")

    st.subheader("Register payment")
    amount = st.text_input("Amount (DKK)", value=utils.format_dkk(fee))
    if st.button("Register payment", type="primary"):
        show(club.payments.register_payment(member_id, amount))

    st.divider()

    st.subheader("Payment history")
    reply = club.payments.view_payments_for_member(member_id)
    if reply.value:
        st.dataframe(utils.payments_frame(reply.value), use_container_width=True, hide_index=True)
    else:
        st.caption(reply.message)

    st.divider()

    st.subheader("Filter members by payment status")
    status = st.selectbox("Payment status", [s.name for s in PaymentStatus])
    reply = club.payments.get_members_by_payment_status(status)
    st.caption(reply.message)
    if reply.value:
        st.dataframe(utils.members_frame(reply.value), use_container_width=True, hide_index=True)

    st.subheader("Correct payment status")
    new_status = st.selectbox("Set status for selected member", [s.name for s in PaymentStatus], key="fix_status")
    if st.button("Update status"):
        show(club.payments.update_member_payment_status(member_id, new_status))


def reminders_page(club: Club):
    st.header("⏰ Payment Reminders")

    pending = club.payments.get_members_pending_list()
    if pending:
        options = {f"{m.name} - ID {m.member_id}": m for m in pending}
        chosen = options[st.selectbox("Pending member", list(options.keys()))]
        message = st.text_input("Message", value=f"Payment reminder for {chosen.name}")
        if st.button("Add reminder", type="primary"):
            show(club.payments.set_payment_reminder(chosen.member_id, message))
    else:
        st.caption("No pending members.")

    st.divider()

    reminders = club.payments.get_all_reminders()
    if not reminders:
        st.caption("No reminders.")
        return
    for i, reminder in enumerate(reminders):
        c1, c2 = st.columns([4, 1])
        c1.write(reminder)
        if c2.button("Remove", key=f"rm_{i}"):
            show(club.payments.remove_reminder(reminder))
            st.rerun()
    if st.button("Clear all reminders"):
        show(club.payments.clear_reminders())
        st.rerun()


def rates_page(club: Club):
    st.header("💰 Payment Rates")

    junior, senior = club.payments.get_payment_rates()
    c1, c2 = st.columns(2)
    c1.metric("Yearly junior-membership price", f"{utils.format_dkk(junior)} DKK")
    c2.metric("Yearly senior-membership price", f"{utils.format_dkk(senior)} DKK")

    st.divider()
    new_junior = st.text_input("New junior rate", value=utils.format_dkk(junior))
    new_senior = st.text_input("New senior rate", value=utils.format_dkk(senior))
    if st.button("Update rates", type="primary"):
        show(club.payments.set_payment_rates(new_junior, new_senior))


def reports_page(club: Club):
    st.header("🧾 Reports")

    members = club.members.member_repository.find_all()
    payments = club.payment_repository.find_all()

    st.subheader("Export members to CSV")
    if members:
        st.download_button(
            "Download members.csv",
            data=utils.members_to_csv_bytes(members),
            file_name="members.csv",
            mime="text/csv",
        )
    else:
        st.caption("No members to export.")

    st.divider()

    st.subheader("Export payments to CSV")
    if payments:
        st.download_button(
            "Download payments.csv",
            data=utils.payments_to_csv_bytes(payments),
            file_name="payments.csv",
            mime="text/csv",
        )
    else:
        st.caption("No payments to export.")

    st.divider()

    st.subheader("Revenue summary by month")
    st.dataframe(utils.revenue_summary_by_month(payments), use_container_width=True, hide_index=True)


def settings_page():
    st.header("⚙️ Settings")
    st.subheader("Change password")
    password_form("Update password")


def main_app(club: Club):
    st.sidebar.title("🏊 Swim Club")
    st.sidebar.caption(f"Logged in as: {st.session_state.username}")

    pages = ["Dashboard", "Members", "Payments", "Reminders", "Rates", "Reports", "Settings"]
    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.sidebar.button("Logout"):
        logout()
        st.rerun()

    if st.session_state.page == "Dashboard":
        dashboard_page(club)
    elif st.session_state.page == "Members":
        members_page(club)
    elif st.session_state.page == "Payments":
        payments_page(club)
    elif st.session_state.page == "Reminders":
        reminders_page(club)
    elif st.session_state.page == "Rates":
        rates_page(club)
    elif st.session_state.page == "Reports":
        reports_page(club)
    elif st.session_state.page == "Settings":
        settings_page()


# --------- App entry ---------

def run():
    try:
        club = load_club()
    except IntegrityError as exc:
        logger.error(f"Club ledger could not be loaded: {exc}")
        st.error(f"The payment ledger is inconsistent and cannot be loaded: {exc}")
        st.stop()
    require_login()

    if not st.session_state.logged_in:
        login_screen()
        return

    if auth.is_force_password_change(config.USERS_FILE, st.session_state.username):
        force_change_password_screen()
        return

    main_app(club)


if __name__ == "__main__":
    run()
