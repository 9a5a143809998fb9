from decimal import Decimal
from unittest import mock

import pytest
from django.core.exceptions import ValidationError
from django.db import DatabaseError

from core.approvals import (
    approve_booking_request,
    reject_booking_request,
    transition_agent,
    transition_service_request,
)
from core.models import (
    AgentNotification,
    BookingRoom,
    Guest,
    Payment,
    ServiceRequest,
)
from core.workflow import TransitionError

SITE = "https://resort.example"


@pytest.mark.django_db
def test_approval_creates_guest_room_and_partial_payment(make_booking_request):
    req = make_booking_request()

    decision = approve_booking_request(req, notes="Welcome", site_url=SITE)

    req.refresh_from_db()
    assert req.status == "approved"
    assert req.approved_by == "Admin"
    assert req.approved_at is not None
    assert req.admin_notes == "Welcome"
    assert req.guest == decision.guest

    guest = decision.guest
    assert guest.booking_type == "b2b"
    assert guest.booking_status == "confirmed"
    assert guest.number_of_packs == 2
    assert guest.confirmation_number == req.confirmation_number
    assert guest.check_in_link == f"{SITE}/check-in?confirmation={req.confirmation_number}"

    room = BookingRoom.objects.get(guest=guest)
    assert room.number_of_rooms == 2

    payment = Payment.objects.get(guest=guest)
    assert payment.total_amount == Decimal("1000.00")
    assert payment.paid_amount == Decimal("400.00")
    assert payment.balance_due == Decimal("600.00")
    assert payment.payment_status == "partial"
    assert payment.payment_method == "online_booking"


@pytest.mark.django_db
def test_full_advance_marks_payment_paid(make_booking_request):
    req = make_booking_request(advance_amount=Decimal("1000.00"))

    decision = approve_booking_request(req, site_url=SITE)

    assert decision.payment.payment_status == "paid"
    assert decision.payment.balance_due == Decimal("0.00")


@pytest.mark.django_db
def test_approval_notifies_agent_and_returns_whatsapp_link(make_booking_request, agent):
    req = make_booking_request()

    decision = approve_booking_request(req, site_url=SITE)

    notification = AgentNotification.objects.get(agent=agent)
    assert notification.notification_type == "booking_status"
    assert notification.title == "Booking Confirmed!"
    assert notification.related_id == req.pk
    assert notification.is_read is False
    assert decision.whatsapp_link.startswith("https://wa.me/919845012345?text=")


@pytest.mark.django_db
def test_agent_without_whatsapp_gets_no_link(make_agent, make_booking_request):
    quiet = make_agent(email="quiet@example.com")
    req = make_booking_request(agent=quiet)

    decision = approve_booking_request(req, site_url=SITE)

    assert decision.whatsapp_link is None


@pytest.mark.django_db
def test_second_approval_is_refused(make_booking_request):
    req = make_booking_request()
    approve_booking_request(req, site_url=SITE)

    with pytest.raises(TransitionError):
        approve_booking_request(req, site_url=SITE)

    assert Guest.objects.count() == 1
    assert Payment.objects.count() == 1
    assert AgentNotification.objects.count() == 1


@pytest.mark.django_db
def test_failed_payment_insert_rolls_back_everything(make_booking_request):
    req = make_booking_request()

    with mock.patch(
        "core.approvals.create_derived_payment", side_effect=DatabaseError("boom")
    ):
        with pytest.raises(DatabaseError):
            approve_booking_request(req, site_url=SITE)

    req.refresh_from_db()
    assert req.status == "pending"
    assert req.guest is None
    assert Guest.objects.count() == 0
    assert BookingRoom.objects.count() == 0
    assert Payment.objects.count() == 0
    assert AgentNotification.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.parametrize("notes", ["", "   "])
def test_rejection_requires_a_reason(make_booking_request, notes):
    req = make_booking_request()

    with pytest.raises(ValidationError):
        reject_booking_request(req, notes=notes)

    req.refresh_from_db()
    assert req.status == "pending"
    assert req.admin_notes == ""
    assert AgentNotification.objects.count() == 0


@pytest.mark.django_db
def test_rejection_records_reason_and_notifies(make_booking_request, agent, admin_user):
    req = make_booking_request()

    decision = reject_booking_request(req, actor=admin_user, notes=" Dates full ")

    req.refresh_from_db()
    assert req.status == "rejected"
    assert req.admin_notes == "Dates full"
    assert req.approved_by == admin_user.get_username()
    assert Guest.objects.count() == 0

    notification = AgentNotification.objects.get(agent=agent)
    assert notification.title == "Booking Request Rejected"
    assert "Dates full" in notification.message
    assert "Dates%20full" in decision.whatsapp_link


@pytest.mark.django_db
def test_decisions_are_kept_in_history(make_booking_request):
    req = make_booking_request()
    approve_booking_request(req, site_url=SITE)

    assert [h.status for h in req.history.order_by("history_id")] == [
        "pending",
        "approved",
    ]


@pytest.mark.django_db
def test_agent_approval_sends_account_notification(make_agent):
    pending = make_agent(email="new@example.com", status="pending")

    transition_agent(pending, "approve")

    assert pending.status == "approved"
    assert pending.approved_by == "Admin"
    notification = AgentNotification.objects.get(agent=pending)
    assert notification.notification_type == "announcement"
    assert notification.title == "Account Approved"


@pytest.mark.django_db
def test_agent_cannot_be_rejected_twice(make_agent):
    pending = make_agent(email="new@example.com", status="pending")
    transition_agent(pending, "reject")

    with pytest.raises(TransitionError):
        transition_agent(pending, "reject")

    assert AgentNotification.objects.filter(agent=pending).count() == 1


@pytest.mark.django_db
def test_service_request_completion_is_timestamped(make_booking_request):
    guest = approve_booking_request(make_booking_request(), site_url=SITE).guest
    sr = ServiceRequest.objects.create(
        guest=guest, service_category="housekeeping", request_details="Towels"
    )

    transition_service_request(sr, "start")
    assert sr.status == "in_progress"
    assert sr.completed_at is None

    transition_service_request(sr, "complete")
    assert sr.status == "completed"
    assert sr.completed_at is not None

    with pytest.raises(TransitionError):
        transition_service_request(sr, "cancel")
