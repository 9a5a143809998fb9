import re
from datetime import date, timedelta

import pytest
from django.core.exceptions import ValidationError

from core.models import (
    AgentCommissionOverride,
    B2BBookingRequest,
    PaymentConfig,
    PropertyType,
    Room,
)


@pytest.mark.django_db
def test_new_property_type_generates_numbered_rooms():
    pt = PropertyType.objects.create(
        property_name="Deluxe", number_of_rooms=3, room_prefix="A"
    )

    assert set(pt.rooms.values_list("room_number", flat=True)) == {"A1", "A2", "A3"}
    assert all(room.is_available for room in pt.rooms.all())


@pytest.mark.django_db
def test_room_prefix_is_upper_cased():
    pt = PropertyType.objects.create(
        property_name="Pod", number_of_rooms=2, room_prefix=" p "
    )

    pt.refresh_from_db()
    assert pt.room_prefix == "P"
    assert sorted(pt.rooms.values_list("room_number", flat=True)) == ["P1", "P2"]


@pytest.mark.django_db
def test_editing_room_count_does_not_regenerate_rooms(property_type):
    property_type.number_of_rooms = 10
    property_type.save()

    assert property_type.rooms.count() == 3
    assert Room.objects.count() == 3


@pytest.mark.django_db
def test_confirmation_number_is_generated(make_booking_request):
    req = make_booking_request()

    assert re.fullmatch(r"B2BREQ\d{6}[A-Z0-9]{3}", req.confirmation_number)


@pytest.mark.django_db
def test_check_out_must_follow_check_in(make_booking_request):
    req = make_booking_request()
    req.check_out_date = req.check_in_date

    with pytest.raises(ValidationError) as exc:
        req.full_clean()
    assert "check_out_date" in exc.value.message_dict


@pytest.mark.django_db
def test_override_window_must_not_be_inverted(agent):
    override = AgentCommissionOverride(
        agent=agent,
        start_date=date.today(),
        end_date=date.today() - timedelta(days=1),
    )

    with pytest.raises(ValidationError):
        override.full_clean()


@pytest.mark.django_db
def test_payment_config_is_a_single_general_row():
    assert PaymentConfig.load() is None

    config = PaymentConfig.objects.create(upi_id="resort@upi")
    config.upi_id = "front@upi"
    config.save()

    assert PaymentConfig.objects.count() == 1
    assert PaymentConfig.load().upi_id == "front@upi"
    assert PaymentConfig.load().config_type == "general"


@pytest.mark.django_db
def test_booking_request_keeps_agent_protected(make_booking_request, agent):
    from django.db.models import ProtectedError

    make_booking_request()

    with pytest.raises(ProtectedError):
        agent.delete()
    assert B2BBookingRequest.objects.count() == 1


@pytest.mark.django_db
def test_models_have_no_pending_migrations():
    from io import StringIO

    from django.core.management import call_command

    # exits non-zero when a model field drifts from the migration
    call_command("makemigrations", "core", "--check", "--dry-run", stdout=StringIO())
