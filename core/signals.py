# core/signals.py
import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import PropertyType, SpecialOffer
from .notifications import announce_offer

logger = logging.getLogger(__name__)


# --- 1. PROPERTY TYPES ---


@receiver(post_save, sender=PropertyType)
def property_type_post_save(sender, instance, created, raw=False, **kwargs):
    """
    Generates PREFIX1..PREFIXn rooms for a new property type.
    Edits never regenerate rooms, even if the room count changes.
    """
    if not created or raw:
        return

    rooms = instance.generate_rooms()
    logger.info(
        "Generated %d room(s) for property type %s", len(rooms), instance.property_name
    )


# --- 2. SPECIAL OFFERS ---


@receiver(post_save, sender=SpecialOffer)
def special_offer_post_save(sender, instance, created, raw=False, **kwargs):
    """New offers notify their target agent, or every approved agent."""
    if not created or raw:
        return

    announce_offer(instance)
