# core/commission.py
import logging
from decimal import Decimal

from .constants import DEFAULT_COMMISSION_PERCENTAGE
from .models import AgentCommissionOverride

logger = logging.getLogger(__name__)


def active_overrides(on_date):
    return AgentCommissionOverride.objects.filter(
        is_active=True, start_date__lte=on_date, end_date__gte=on_date
    )


def get_agent_commission_percentage(agent, property_type, on_date):
    """
    Commission that applies to an agent booking a property on a date.

    Overrides are matched most-specific first: agent + property, agent only,
    property only, then overrides left open for every agent and property.
    Without a match the agent's default applies. Returns None for agents
    that are not approved.
    """
    if agent is None or agent.status != "approved":
        return None

    default = agent.commission_percentage or Decimal(DEFAULT_COMMISSION_PERCENTAGE)
    overrides = list(active_overrides(on_date))
    property_id = property_type.pk if property_type else None

    for agent_id, prop_id in (
        (agent.pk, property_id),
        (agent.pk, None),
        (None, property_id),
        (None, None),
    ):
        for override in overrides:
            if override.agent_id == agent_id and override.property_type_id == prop_id:
                logger.debug("Commission override %s applies", override.pk)
                return override.commission_percentage

    return default


def calculate_b2b_price(regular_price, commission_percentage):
    regular_price = Decimal(str(regular_price))
    discount = regular_price * Decimal(str(commission_percentage)) / Decimal("100")
    return regular_price - discount
