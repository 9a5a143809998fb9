# core/notifications.py
import logging

from .models import AgentNotification, B2BAgent
from .utils import format_percentage

logger = logging.getLogger(__name__)

AGENT_STATUS_MESSAGES = {
    "approved": (
        "Account Approved",
        "Your B2B agent account has been approved! You can now login and start "
        "making bookings.",
    ),
    "rejected": (
        "Account Rejected",
        "Your B2B agent account application has been rejected. Please contact "
        "support for more information.",
    ),
}


def notify_agent(agent, notification_type, title, message, related_id=None):
    """Stores one unread notification in the agent's inbox."""
    return AgentNotification.objects.create(
        agent=agent,
        notification_type=notification_type,
        title=title,
        message=message,
        related_id=related_id,
        is_read=False,
    )


def notify_agent_status(agent):
    title, message = AGENT_STATUS_MESSAGES[agent.status]
    return notify_agent(agent, "announcement", title, message)


def offer_recipients(offer):
    if offer.target_agent_id:
        return [offer.target_agent]
    return list(B2BAgent.objects.filter(status="approved").order_by("agent_name"))


def announce_offer(offer):
    """
    Fans a new offer out to its audience: the targeted agent, or every
    approved agent when the offer is not targeted.
    """
    recipients = offer_recipients(offer)
    message = (
        f"{offer.offer_title}: {format_percentage(offer.discount_percentage)}% "
        "discount on bookings."
    )
    notifications = AgentNotification.objects.bulk_create(
        [
            AgentNotification(
                agent=agent,
                notification_type="offer",
                title="New Special Offer Available",
                message=message,
                related_id=offer.pk,
                is_read=False,
            )
            for agent in recipients
        ]
    )
    logger.info("Offer %s announced to %d agent(s)", offer.pk, len(notifications))
    return notifications
