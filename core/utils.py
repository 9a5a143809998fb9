# core/utils.py
import logging
import re
from decimal import Decimal
from urllib.parse import quote, urlencode

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"


# --- FORMATTING ---
def format_percentage(value):
    """20.00 -> '20', 12.50 -> '12.5'."""
    if value is None:
        return "0"
    normalized = Decimal(str(value)).normalize()
    return f"{normalized:f}"


def format_amount(value):
    return f"₹{Decimal(str(value or 0)):,.2f}"


def format_date(value):
    if not value:
        return "—"
    return value.strftime("%d/%m/%Y")


def related_or_default(obj, path, default="—"):
    """Follows a dotted attribute path, falling back when a relation is missing."""
    for attr in path.split("."):
        obj = getattr(obj, attr, None)
        if obj is None:
            return default
    return obj


# --- LINKS ---
def build_check_in_link(confirmation_number, site_url=None):
    base = (site_url or settings.PUBLIC_SITE_URL).rstrip("/")
    return f"{base}/check-in?{urlencode({'confirmation': confirmation_number or ''})}"


def normalize_phone(phone):
    return re.sub(r"\D", "", phone or "")


def build_whatsapp_link(phone, text):
    """
    wa.me deep link for a phone number and free text. Opening it is left to
    the operator; nothing confirms delivery.
    """
    return f"{WHATSAPP_BASE_URL}{normalize_phone(phone)}?text={quote(text or '', safe='')}"


# --- MESSAGE TEMPLATES ---
def booking_approved_message(booking_request, check_in_link):
    r = booking_request
    return (
        "🎉 *Booking Request Approved!*\n\n"
        f"Dear {related_or_default(r, 'agent.agent_name')},\n\n"
        "Your booking request has been approved.\n\n"
        "*Booking Details:*\n"
        f"*Confirmation Number:* {r.confirmation_number}\n"
        f"*Guest Name:* {r.guest_name}\n"
        f"*Property:* {related_or_default(r, 'property_type.property_name')}\n"
        f"*Check-in:* {format_date(r.check_in_date)}\n"
        f"*Check-out:* {format_date(r.check_out_date)}\n"
        f"*Rooms:* {r.number_of_rooms}\n"
        f"*Adults:* {r.number_of_adults} | *Kids:* {r.number_of_kids}\n"
        f"*Agent Rate:* {format_amount(r.agent_rate)}\n"
        f"*Advance Paid:* {format_amount(r.advance_amount)}\n\n"
        f"*Guest Check-in Link:*\n{check_in_link}\n\n"
        "Please share this confirmation and check-in link with your guest."
    )


def booking_rejected_message(booking_request):
    r = booking_request
    return (
        "❌ *Booking Request Rejected*\n\n"
        f"Dear {related_or_default(r, 'agent.agent_name')},\n\n"
        "We regret to inform you that your booking request has been rejected.\n\n"
        "*Booking Details:*\n"
        f"*Confirmation Number:* {r.confirmation_number}\n"
        f"*Guest Name:* {r.guest_name}\n"
        f"*Property:* {related_or_default(r, 'property_type.property_name')}\n"
        f"*Check-in:* {format_date(r.check_in_date)}\n"
        f"*Check-out:* {format_date(r.check_out_date)}\n"
        f"*Rooms:* {r.number_of_rooms}\n\n"
        f"*Reason for Rejection:*\n{r.admin_notes or 'No reason provided'}\n\n"
        "If you have any questions or would like to discuss this further, "
        "please contact us."
    )


def agent_contact_fallback(agent):
    """Shown instead of a link when the agent never set a WhatsApp number."""
    return (
        f"WhatsApp number not available. Agent: {related_or_default(agent, 'agent_name')}, "
        f"Phone: {related_or_default(agent, 'phone')}, "
        f"Email: {related_or_default(agent, 'email')}. "
        "Please contact them directly."
    )


# --- PUSH DELIVERY (optional) ---
def send_whatsapp_message(phone, text):
    """
    Pushes a message through the configured WhatsApp API, if any.
    Returns: (bool: Success?, str: Message)
    """
    from core.models import (  # Import inside to avoid circular dependency
        WhatsAppSettings,
    )

    config = WhatsAppSettings.objects.first()
    if not config or not config.can_push:
        return False, "WhatsApp API not configured; use the link instead."

    if not normalize_phone(phone):
        return False, "No phone number to send to."

    try:
        payload = {"token": config.api_token, "to": normalize_phone(phone), "body": text}
        response = requests.post(config.api_url, data=payload, timeout=30)

        if response.status_code == 200:
            return True, "Sent successfully."
        logger.warning(
            "WhatsApp API error: %s - %s", response.status_code, response.text
        )
        return False, f"API Error: {response.text}"

    except requests.RequestException as e:
        logger.exception("WhatsApp API connection error")
        return False, f"Connection Error: {str(e)}"


# Sidebar badge: booking requests waiting for a decision
def badge_callback(request):
    from core.models import B2BBookingRequest

    if not request.user.is_authenticated:
        return None

    return B2BBookingRequest.objects.filter(status="pending").count() or None
