# core/views.py
import logging

from django.contrib import admin, messages
from django.contrib.admin.views.decorators import staff_member_required
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils.html import format_html

from .approvals import approve_booking_request, reject_booking_request
from .commission import calculate_b2b_price, get_agent_commission_percentage
from .finance import PaymentStats
from .forms import BookingReviewForm, GuestPhotoForm
from .models import B2BAgent, B2BBookingRequest, Guest, GuestPhoto, ServiceRequest
from .permissions import can_manage_financials, can_review_b2b
from .utils import agent_contact_fallback, send_whatsapp_message
from .workflow import ACTION_LABELS, BOOKING_REQUEST_WORKFLOW, TransitionError

logger = logging.getLogger(__name__)


# healthcheck for load balancers
def healthz(request):
    """Simple healthcheck for load balancers."""
    from django.db import connection

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return HttpResponse("OK", status=200)
    except DatabaseError:
        return HttpResponse("DB Error", status=503)


# --- OPERATIONS DASHBOARD ---
@staff_member_required
def operations_dashboard(request):
    context = admin.site.each_context(request)

    context.update(
        {
            "title": "Operations Dashboard",
            "pending_agents": B2BAgent.objects.filter(status="pending").count(),
            "pending_requests": B2BBookingRequest.objects.filter(
                status="pending"
            ).count(),
            "open_service_requests": ServiceRequest.objects.filter(
                status__in=["received", "in_progress"]
            ).count(),
            "show_payments": can_manage_financials(request.user),
            "payments": PaymentStats.summary(),
            "payment_counts": PaymentStats.count_by_status(),
        }
    )

    return render(request, "core/dashboard.html", context)


# --- BOOKING REQUEST REVIEW ---
def _changelist_url():
    return reverse("admin:core_b2bbookingrequest_changelist")


def _announce_whatsapp(request, decision):
    agent = decision.booking_request.agent
    if not decision.whatsapp_link:
        messages.warning(request, agent_contact_fallback(agent))
        return

    # Pushed when an API is configured, otherwise the operator opens the link
    sent, _ = send_whatsapp_message(agent.whatsapp_number, decision.message)
    if sent:
        messages.success(request, f"📲 WhatsApp sent to {agent.agent_name}.")
    else:
        messages.info(
            request,
            format_html(
                'Notify the agent: <a href="{}" target="_blank" rel="noopener">'
                "💬 Open WhatsApp</a>",
                decision.whatsapp_link,
            ),
        )


@staff_member_required
def review_booking_request(request, pk):
    """
    Admin View: approve or reject a single booking request. Buttons are only
    offered while the request is still pending.
    """
    if not can_review_b2b(request.user):
        messages.error(request, "You don't have permission to review booking requests.")
        return redirect(_changelist_url())

    booking_request = get_object_or_404(
        B2BBookingRequest.objects.select_related("agent", "property_type"), pk=pk
    )

    form = BookingReviewForm(request.POST or None)

    if request.method == "POST" and form.is_valid():
        notes = form.cleaned_data["admin_notes"]
        site_url = request.build_absolute_uri("/")
        try:
            if "_approve" in request.POST:
                decision = approve_booking_request(
                    booking_request, actor=request.user, notes=notes, site_url=site_url
                )
                messages.success(
                    request,
                    f"✅ Booking request {booking_request.confirmation_number} approved.",
                )
                _announce_whatsapp(request, decision)
                return redirect(_changelist_url())

            if "_reject" in request.POST:
                decision = reject_booking_request(
                    booking_request, actor=request.user, notes=notes
                )
                messages.success(
                    request,
                    f"🚫 Booking request {booking_request.confirmation_number} rejected.",
                )
                _announce_whatsapp(request, decision)
                return redirect(_changelist_url())

        except ValidationError as e:
            form.add_error("admin_notes", e)
        except TransitionError as e:
            messages.error(request, f"❌ {e}")
            return redirect(_changelist_url())
        except DatabaseError:
            logger.exception(
                "Failed to decide booking request %s", booking_request.pk
            )
            messages.error(
                request, "❌ Failed to update booking request. Please try again."
            )
            return redirect(_changelist_url())

    commission = get_agent_commission_percentage(
        booking_request.agent,
        booking_request.property_type,
        booking_request.check_in_date,
    )
    expected_rate = (
        calculate_b2b_price(booking_request.total_cost, commission)
        if commission is not None
        else None
    )

    context = admin.site.each_context(request)
    context.update(
        {
            "title": f"Review {booking_request.confirmation_number}",
            "booking_request": booking_request,
            "form": form,
            "actions": [
                (action, ACTION_LABELS[action])
                for action in BOOKING_REQUEST_WORKFLOW.allowed_actions(
                    booking_request.status
                )
            ],
            "commission": commission,
            "expected_rate": expected_rate,
            "opts": B2BBookingRequest._meta,
        }
    )
    return render(request, "admin/core/b2bbookingrequest/review.html", context)


# --- PUBLIC GUEST PHOTO COLLECTION ---
def guest_photos(request, guest_id):
    guest = get_object_or_404(Guest, pk=guest_id, is_deleted=False)

    if request.method == "POST":
        form = GuestPhotoForm(request.POST, request.FILES)
        if form.is_valid():
            with transaction.atomic():
                for image in form.cleaned_data["photos"]:
                    GuestPhoto.objects.create(guest=guest, photo=image)
            return render(
                request,
                "core/photos_success.html",
                {"guest": guest, "count": len(form.cleaned_data["photos"])},
            )
    else:
        form = GuestPhotoForm()

    return render(request, "core/guest_photos.html", {"form": form, "guest": guest})
