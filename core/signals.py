"""
Django signals keeping listing ratings derived from reviews.

Review creation refreshes the listing rating explicitly in
core.reviews.create_review. Reviews can also disappear outside that path
(admin deletion, cascading listing or booking deletion), so deletions
trigger the same recalculation here.
"""

import logging

from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import Review
from .ratings import recalculate_listing_rating

logger = logging.getLogger(__name__)


@receiver(post_delete, sender=Review)
def update_rating_on_review_delete(sender, instance, **kwargs):
    """
    Recalculate the listing aggregate after a review is deleted.

    During a cascading listing deletion the listing row is still present
    when this runs and is removed right after, in the same transaction.

    Args:
        sender: The Review model class
        instance: The Review instance that was deleted
        **kwargs: Additional keyword arguments
    """
    try:
        recalculate_listing_rating(instance.listing_id)
    except Exception as e:
        logger.error(
            f"Error updating rating after deleting review {instance.id}: {e}",
            exc_info=True
        )
        # Re-raise to roll back the deletion and keep the aggregate derived
        raise
