from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

import pytest
import requests

from core.forms import StaffUserForm
from core.models import StaffUser, WhatsAppSettings
from core.utils import (
    agent_contact_fallback,
    build_whatsapp_link,
    format_amount,
    format_percentage,
    related_or_default,
    send_whatsapp_message,
)


def test_whatsapp_link_strips_phone_and_encodes_text():
    link = build_whatsapp_link("+91 98450-12345", "Hi there & welcome")

    assert link == "https://wa.me/919845012345?text=Hi%20there%20%26%20welcome"


def test_whatsapp_link_without_phone_has_no_recipient():
    assert build_whatsapp_link("", "Hi") == "https://wa.me/?text=Hi"


def test_formatting_helpers():
    assert format_percentage(Decimal("20.00")) == "20"
    assert format_percentage(Decimal("12.50")) == "12.5"
    assert format_amount(Decimal("1234567.5")) == "₹1,234,567.50"


def test_missing_relations_fall_back():
    request = SimpleNamespace(agent=None)

    assert related_or_default(request, "agent.agent_name") == "—"
    assert "Agent: —" in agent_contact_fallback(None)


@pytest.mark.django_db
def test_push_is_skipped_without_configuration():
    ok, detail = send_whatsapp_message("9845012345", "Hello")

    assert ok is False
    assert "not configured" in detail


@pytest.mark.django_db
def test_push_posts_to_configured_api():
    WhatsAppSettings.objects.create(api_url="https://api.example.com/send", api_token="t0k")

    with mock.patch("core.utils.requests.post") as post:
        post.return_value = SimpleNamespace(status_code=200, text="ok")
        ok, _ = send_whatsapp_message("+91 98450 12345", "Hello")

    assert ok is True
    assert post.call_args.kwargs["data"]["to"] == "919845012345"


@pytest.mark.django_db
def test_push_connection_error_is_reported_not_raised():
    WhatsAppSettings.objects.create(api_url="https://api.example.com/send", api_token="t0k")

    with mock.patch(
        "core.utils.requests.post", side_effect=requests.ConnectionError("down")
    ):
        ok, detail = send_whatsapp_message("9845012345", "Hello")

    assert ok is False
    assert detail.startswith("Connection Error")


@pytest.mark.django_db
def test_staff_password_is_required_on_create_and_kept_on_blank_edit():
    data = {
        "email": "desk@example.com",
        "full_name": "Front Desk",
        "role": "receptionist",
        "is_active": "on",
    }
    assert not StaffUserForm(data=data).is_valid()

    form = StaffUserForm(data={**data, "password": "s3cret-pass"})
    assert form.is_valid(), form.errors
    staff = form.save()
    assert staff.password_hash != "s3cret-pass"
    assert staff.check_password("s3cret-pass")

    original_hash = staff.password_hash
    edit = StaffUserForm(data={**data, "full_name": "Desk Lead"}, instance=staff)
    assert edit.is_valid(), edit.errors
    edit.save()

    staff = StaffUser.objects.get(pk=staff.pk)
    assert staff.full_name == "Desk Lead"
    assert staff.password_hash == original_hash
