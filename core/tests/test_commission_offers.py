from datetime import date, timedelta
from decimal import Decimal

import pytest

from core.commission import calculate_b2b_price, get_agent_commission_percentage
from core.models import AgentCommissionOverride, AgentNotification, PropertyType, SpecialOffer

TODAY = date(2025, 6, 15)


def override(**kwargs):
    defaults = {
        "start_date": TODAY - timedelta(days=5),
        "end_date": TODAY + timedelta(days=5),
    }
    defaults.update(kwargs)
    return AgentCommissionOverride.objects.create(**defaults)


@pytest.mark.django_db
def test_unapproved_agent_has_no_commission(make_agent, property_type):
    pending = make_agent(email="p@example.com", status="pending")

    assert get_agent_commission_percentage(pending, property_type, TODAY) is None


@pytest.mark.django_db
def test_default_commission_without_overrides(agent, property_type):
    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("10")


@pytest.mark.django_db
def test_most_specific_override_wins(agent, property_type):
    override(property_type=property_type, commission_percentage=Decimal("12.00"))
    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("12.00")

    override(agent=agent, commission_percentage=Decimal("14.00"))
    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("14.00")

    override(agent=agent, property_type=property_type, commission_percentage=Decimal("18.00"))
    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("18.00")


@pytest.mark.django_db
def test_override_open_to_everyone_applies(agent, property_type):
    override(commission_percentage=Decimal("20.00"))

    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("20.00")


@pytest.mark.django_db
def test_scoped_override_beats_open_override(agent, property_type):
    override(commission_percentage=Decimal("20.00"))
    override(property_type=property_type, commission_percentage=Decimal("12.00"))

    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("12.00")


@pytest.mark.django_db
def test_inactive_and_expired_overrides_are_ignored(agent, property_type):
    override(agent=agent, commission_percentage=Decimal("20.00"), is_active=False)
    override(
        agent=agent,
        commission_percentage=Decimal("25.00"),
        start_date=TODAY - timedelta(days=30),
        end_date=TODAY - timedelta(days=1),
    )

    assert get_agent_commission_percentage(agent, property_type, TODAY) == Decimal("10")


def test_b2b_price_subtracts_commission():
    assert calculate_b2b_price(Decimal("1000"), Decimal("15")) == Decimal("850")
    assert calculate_b2b_price("4500.00", 10) == Decimal("4050.00")


@pytest.mark.django_db
def test_untargeted_offer_reaches_every_approved_agent(make_agent):
    a = make_agent(email="a@example.com", agent_name="Asha")
    b = make_agent(email="b@example.com", agent_name="Bala")
    make_agent(email="c@example.com", status="pending")

    offer = SpecialOffer.objects.create(
        offer_title="Monsoon Deal",
        discount_percentage=Decimal("20.00"),
        valid_from=TODAY,
        valid_to=TODAY + timedelta(days=30),
    )

    notifications = AgentNotification.objects.filter(related_id=offer.pk)
    assert {n.agent_id for n in notifications} == {a.pk, b.pk}
    for n in notifications:
        assert n.notification_type == "offer"
        assert n.title == "New Special Offer Available"
        assert n.message == "Monsoon Deal: 20% discount on bookings."
        assert n.is_read is False


@pytest.mark.django_db
def test_targeted_offer_reaches_only_its_agent(make_agent):
    target = make_agent(email="t@example.com")
    make_agent(email="other@example.com")
    pt = PropertyType.objects.create(property_name="Tent", number_of_rooms=1, room_prefix="T")

    SpecialOffer.objects.create(
        offer_title="Tent Week",
        discount_percentage=Decimal("12.50"),
        valid_from=TODAY,
        valid_to=TODAY,
        property_type=pt,
        target_agent=target,
    )

    notification = AgentNotification.objects.get()
    assert notification.agent == target
    assert notification.message == "Tent Week: 12.5% discount on bookings."


@pytest.mark.django_db
def test_editing_an_offer_sends_nothing_new(make_agent):
    make_agent()
    offer = SpecialOffer.objects.create(
        offer_title="Flash", discount_percentage=5, valid_from=TODAY, valid_to=TODAY
    )
    offer.offer_title = "Flash Sale"
    offer.save()

    assert AgentNotification.objects.count() == 1
