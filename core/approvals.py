# core/approvals.py
"""
Operator-driven status transitions and their side effects.

Every transition runs in a single database transaction: the status update,
any derived records and the agent notification either all land or none do.
The entity is re-read under a row lock and its status checked again inside
the transaction, so two operators acting on the same row cannot both apply
the same transition.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .constants import DEFAULT_COUNTRY_CODE
from .models import (
    B2BAgent,
    B2BBookingRequest,
    BookingRoom,
    Guest,
    Payment,
    ServiceRequest,
)
from .notifications import notify_agent, notify_agent_status
from .utils import (
    build_check_in_link,
    build_whatsapp_link,
    booking_approved_message,
    booking_rejected_message,
    format_amount,
    format_date,
)
from .workflow import (
    AGENT_WORKFLOW,
    BOOKING_REQUEST_WORKFLOW,
    SERVICE_REQUEST_WORKFLOW,
)

logger = logging.getLogger(__name__)


@dataclass
class BookingDecision:
    booking_request: B2BBookingRequest
    whatsapp_link: Optional[str] = None
    message: str = ""
    guest: Optional[Guest] = None
    booking_room: Optional[BookingRoom] = None
    payment: Optional[Payment] = None


def actor_name(user):
    if user is None or not getattr(user, "is_authenticated", False):
        return "Admin"
    return user.get_username()


# --- AGENTS ---
def transition_agent(agent, action, actor=None):
    """Approve or reject a pending agent and tell them about it."""
    with transaction.atomic():
        locked = B2BAgent.objects.select_for_update().get(pk=agent.pk)
        locked.status = AGENT_WORKFLOW.next_status(locked.status, action)
        locked.approved_at = timezone.now()
        locked.approved_by = actor_name(actor)
        locked.save(update_fields=["status", "approved_at", "approved_by"])
        notify_agent_status(locked)

    logger.info("Agent %s %s by %s", locked.pk, locked.status, locked.approved_by)
    agent.refresh_from_db()
    return agent


# --- BOOKING REQUESTS ---
def create_derived_guest(booking_request, check_in_link):
    r = booking_request
    return Guest.objects.create(
        guest_name=r.guest_name,
        country_code=DEFAULT_COUNTRY_CODE,
        phone=r.guest_phone,
        number_of_packs=r.number_of_adults,
        number_of_kids=r.number_of_kids,
        property_type=r.property_type,
        agent=r.agent,
        check_in_date=r.check_in_date,
        check_out_date=r.check_out_date,
        meal_preference="veg",
        food_remarks=f"B2B Booking - City: {r.guest_city}",
        final_remarks=f"Booked by B2B Agent ({r.agent.agent_name})",
        booking_status="confirmed",
        booking_type="b2b",
        confirmation_number=r.confirmation_number or "",
        check_in_link=check_in_link,
        is_deleted=False,
    )


def create_derived_payment(booking_request, guest):
    r = booking_request
    balance_due, payment_status = Payment.settle(r.agent_rate, r.advance_amount)
    return Payment.objects.create(
        guest=guest,
        total_amount=r.agent_rate,
        paid_amount=r.advance_amount,
        balance_due=balance_due,
        payment_status=payment_status,
        payment_method="online_booking",
        payment_notes=f"B2B Agent advance payment: {format_amount(r.advance_amount)}",
        refund_amount=0,
    )


def _lock_booking_request(booking_request):
    return (
        B2BBookingRequest.objects.select_for_update(of=("self",))
        .select_related("agent", "property_type")
        .get(pk=booking_request.pk)
    )


def _agent_link(booking_request, message):
    phone = booking_request.agent.whatsapp_number
    if not phone:
        return None
    return build_whatsapp_link(phone, message)


def approve_booking_request(booking_request, actor=None, notes="", site_url=None):
    """
    Approves a pending request. Creates the guest booking, its room
    allocation and the payment record, marks the request approved and
    notifies the agent.
    """
    with transaction.atomic():
        locked = _lock_booking_request(booking_request)
        new_status = BOOKING_REQUEST_WORKFLOW.next_status(locked.status, "approve")

        check_in_link = build_check_in_link(locked.confirmation_number, site_url)
        guest = create_derived_guest(locked, check_in_link)
        booking_room = BookingRoom.objects.create(
            guest=guest,
            property_type=locked.property_type,
            number_of_rooms=locked.number_of_rooms,
        )
        payment = create_derived_payment(locked, guest)

        locked.status = new_status
        locked.admin_notes = notes or ""
        locked.approved_at = timezone.now()
        locked.approved_by = actor_name(actor)
        locked.guest = guest
        locked.save(
            update_fields=["status", "admin_notes", "approved_at", "approved_by", "guest"]
        )

        notify_agent(
            locked.agent,
            "booking_status",
            "Booking Confirmed!",
            f"Booking {locked.confirmation_number} approved! Guest: {locked.guest_name} "
            f"| Check-in: {format_date(locked.check_in_date)} | Link: {check_in_link}",
            related_id=locked.pk,
        )

    logger.info(
        "Booking request %s approved by %s (guest %s)",
        locked.confirmation_number,
        locked.approved_by,
        guest.pk,
    )
    booking_request.refresh_from_db()
    message = booking_approved_message(locked, check_in_link)
    return BookingDecision(
        booking_request=booking_request,
        whatsapp_link=_agent_link(locked, message),
        message=message,
        guest=guest,
        booking_room=booking_room,
        payment=payment,
    )


def reject_booking_request(booking_request, actor=None, notes=""):
    """Rejects a pending request. A reason is mandatory."""
    if not (notes or "").strip():
        raise ValidationError(
            "Please provide a reason for rejection.", code="rejection_note_required"
        )

    with transaction.atomic():
        locked = _lock_booking_request(booking_request)
        locked.status = BOOKING_REQUEST_WORKFLOW.next_status(locked.status, "reject")
        locked.admin_notes = notes.strip()
        locked.approved_at = timezone.now()
        locked.approved_by = actor_name(actor)
        locked.save(update_fields=["status", "admin_notes", "approved_at", "approved_by"])

        notify_agent(
            locked.agent,
            "booking_status",
            "Booking Request Rejected",
            f"Your booking request {locked.confirmation_number} has been rejected. "
            f"Reason: {locked.admin_notes}",
            related_id=locked.pk,
        )

    logger.info(
        "Booking request %s rejected by %s", locked.confirmation_number, locked.approved_by
    )
    booking_request.refresh_from_db()
    message = booking_rejected_message(locked)
    return BookingDecision(
        booking_request=booking_request,
        whatsapp_link=_agent_link(locked, message),
        message=message,
    )


# --- SERVICE REQUESTS ---
def transition_service_request(service_request, action):
    with transaction.atomic():
        locked = ServiceRequest.objects.select_for_update().get(pk=service_request.pk)
        locked.status = SERVICE_REQUEST_WORKFLOW.next_status(locked.status, action)
        fields = ["status"]
        if locked.status == "completed":
            locked.completed_at = timezone.now()
            fields.append("completed_at")
        locked.save(update_fields=fields)

    service_request.refresh_from_db()
    return service_request
