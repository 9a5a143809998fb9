from datetime import date, timedelta
from decimal import Decimal

import pytest

from core.models import B2BAgent, B2BBookingRequest, PropertyType


@pytest.fixture
def property_type(db):
    return PropertyType.objects.create(
        property_name="Lake View Cottage",
        number_of_rooms=3,
        room_prefix="C",
        cost=Decimal("4500.00"),
    )


@pytest.fixture
def make_agent(db):
    def _make(email="agent@example.com", status="approved", **extra):
        defaults = {
            "agent_name": "Ravi Kumar",
            "phone": "9845012345",
            "company_name": "Sunrise Holidays",
            "status": status,
        }
        defaults.update(extra)
        return B2BAgent.objects.create(email=email, **defaults)

    return _make


@pytest.fixture
def agent(make_agent):
    return make_agent(whatsapp_number="+91 98450-12345")


@pytest.fixture
def make_booking_request(agent, property_type):
    def _make(**extra):
        check_in = date.today() + timedelta(days=7)
        defaults = {
            "agent": agent,
            "property_type": property_type,
            "guest_name": "Anita Sharma",
            "guest_phone": "9812345678",
            "guest_city": "Bengaluru",
            "number_of_adults": 2,
            "number_of_kids": 1,
            "check_in_date": check_in,
            "check_out_date": check_in + timedelta(days=2),
            "number_of_rooms": 2,
            "total_cost": Decimal("1200.00"),
            "agent_rate": Decimal("1000.00"),
            "advance_amount": Decimal("400.00"),
        }
        defaults.update(extra)
        return B2BBookingRequest.objects.create(**defaults)

    return _make
