from datetime import date
from types import SimpleNamespace

import pytest
from django.forms.models import model_to_dict

from core.models import SpecialOffer
from core.workflow import (
    AGENT_WORKFLOW,
    BOOKING_REQUEST_WORKFLOW,
    SERVICE_REQUEST_WORKFLOW,
    TransitionError,
    filter_by_status,
    toggle_active,
)


def test_pending_entities_offer_approve_and_reject():
    assert AGENT_WORKFLOW.allowed_actions("pending") == ("approve", "reject")
    assert BOOKING_REQUEST_WORKFLOW.allowed_actions("pending") == ("approve", "reject")


@pytest.mark.parametrize("status", ["approved", "rejected"])
def test_decided_entities_are_terminal(status):
    assert AGENT_WORKFLOW.allowed_actions(status) == ()
    assert BOOKING_REQUEST_WORKFLOW.is_terminal(status)


def test_service_request_lifecycle():
    wf = SERVICE_REQUEST_WORKFLOW
    assert wf.allowed_actions("received") == ("start", "cancel")
    assert wf.allowed_actions("in_progress") == ("complete", "cancel")
    assert wf.next_status("received", "start") == "in_progress"
    assert wf.next_status("in_progress", "complete") == "completed"
    assert wf.is_terminal("completed")
    assert wf.is_terminal("cancelled")


def test_illegal_action_raises():
    with pytest.raises(TransitionError):
        BOOKING_REQUEST_WORKFLOW.next_status("approved", "approve")
    with pytest.raises(TransitionError):
        SERVICE_REQUEST_WORKFLOW.next_status("received", "complete")


def test_filter_by_status_is_idempotent():
    rows = [
        {"id": 1, "status": "pending"},
        {"id": 2, "status": "approved"},
        SimpleNamespace(id=3, status="pending"),
    ]
    once = filter_by_status(rows, "pending")
    twice = filter_by_status(once, "pending")

    assert [r["id"] if isinstance(r, dict) else r.id for r in once] == [1, 3]
    assert once == twice


def test_filter_all_keeps_everything():
    rows = [{"status": "pending"}, {"status": "rejected"}]
    assert filter_by_status(rows, "all") == rows
    assert filter_by_status(rows, "") == rows


@pytest.mark.django_db
def test_toggle_twice_restores_original():
    offer = SpecialOffer.objects.create(
        offer_title="Weekday Escape",
        discount_percentage="10",
        valid_from=date(2025, 1, 1),
        valid_to=date(2025, 1, 31),
    )
    offer.refresh_from_db()
    before = model_to_dict(offer)

    assert toggle_active(offer) is False
    assert toggle_active(offer) is True
    offer.refresh_from_db()
    assert model_to_dict(offer) == before


@pytest.mark.parametrize("status", ["completed", "cancelled"])
def test_closed_service_requests_list_no_next_steps(status):
    from core.admin import next_steps

    assert next_steps(SERVICE_REQUEST_WORKFLOW, status) == "—"


def test_open_service_request_lists_its_actions():
    from core.admin import next_steps

    html = next_steps(SERVICE_REQUEST_WORKFLOW, "in_progress")
    assert "Complete" in html
    assert "Cancel" in html
    assert "Start" not in html
