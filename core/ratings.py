"""
Listing rating aggregation.

A listing's total_ratings and average_rating are a materialised view over
its reviews. They are always recomputed from the full review set, never
incremented, so a missed or concurrent update is corrected by the next run.

The overall average is a two-stage calculation: each category mean is
rounded to one decimal place first, and the overall value is the mean of
those rounded figures, rounded again. Both roundings are half-up.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import Count, Sum

from .models import Listing, Review, RATING_CATEGORIES, rating_field

logger = logging.getLogger(__name__)

RATING_PRECISION = Decimal('0.1')
ZERO_RATING = Decimal('0.0')


@dataclass(frozen=True)
class RatingSummary:
    total_ratings: int
    average_rating: Decimal
    category_averages: dict = field(default_factory=dict)


def round_rating(value):
    """Round to one decimal place, halves away from zero."""
    return Decimal(value).quantize(RATING_PRECISION, rounding=ROUND_HALF_UP)


def summarize_ratings(total_ratings, category_sums):
    """
    Build a RatingSummary from a review count and per-category score sums.

    Args:
        total_ratings: Number of reviews
        category_sums: Mapping of category name to the sum of its scores

    Returns:
        RatingSummary: Aggregate with per-category rounded means
    """
    if not total_ratings:
        return RatingSummary(
            total_ratings=0,
            average_rating=ZERO_RATING,
            category_averages={category: ZERO_RATING for category in RATING_CATEGORIES},
        )

    count = Decimal(total_ratings)
    category_averages = {
        category: round_rating(Decimal(category_sums[category]) / count)
        for category in RATING_CATEGORIES
    }
    overall = sum(category_averages.values(), ZERO_RATING) / Decimal(len(RATING_CATEGORIES))

    return RatingSummary(
        total_ratings=total_ratings,
        average_rating=round_rating(overall),
        category_averages=category_averages,
    )


def calculate_listing_rating(listing_id):
    """
    Compute the aggregate for a listing from its current reviews.

    Score sums are computed in the database so the means are exact.
    """
    totals = Review.objects.filter(listing_id=listing_id).aggregate(
        total=Count('id'),
        **{category: Sum(rating_field(category)) for category in RATING_CATEGORIES}
    )
    return summarize_ratings(totals['total'], totals)


def recalculate_listing_rating(listing_id):
    """
    Recompute and persist a listing's total_ratings and average_rating.

    The listing row is locked while the aggregate is written so concurrent
    runs serialise; whichever finishes last reflects the full review set.

    Args:
        listing_id: Primary key of the listing

    Returns:
        RatingSummary: The persisted aggregate, or None if the listing no
        longer exists
    """
    with transaction.atomic():
        if not Listing.objects.select_for_update().filter(pk=listing_id).exists():
            logger.warning(f"Skipped rating recalculation for missing listing {listing_id}")
            return None

        summary = calculate_listing_rating(listing_id)

        # update() skips Listing.save() validation and auto_now bookkeeping
        Listing.objects.filter(pk=listing_id).update(
            total_ratings=summary.total_ratings,
            average_rating=summary.average_rating,
        )

    logger.info(
        f"Recalculated rating for listing {listing_id}: "
        f"total_ratings={summary.total_ratings}, average_rating={summary.average_rating}"
    )
    return summary
