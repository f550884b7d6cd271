"""
Review creation and owner replies.

A tenant may review a booking once, after it is completed. Every check runs
before the review is written; the listing aggregate is recomputed afterwards
on a best-effort basis.
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import Conflict, InvalidInput, InvalidState, NotFound
from .models import Booking, Review, RATING_CATEGORIES, rating_field
from .permissions import ensure_booking_tenant, ensure_review_owner
from .ratings import recalculate_listing_rating

logger = logging.getLogger(__name__)

RATINGS_ERROR = 'All ratings must be between 1 and 5.'


def _is_valid_score(value):
    # bool is an int subclass; True must not count as a score of 1
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return isinstance(value, int) and 1 <= value <= 5


def validate_ratings(ratings):
    """
    Check all six category scores are present and integers in [1, 5].

    Args:
        ratings: Mapping of category name to score

    Returns:
        dict: Scores keyed by category, as ints

    Raises:
        InvalidInput: If a category is missing or out of range
    """
    if not isinstance(ratings, dict):
        raise InvalidInput(RATINGS_ERROR)

    cleaned = {}
    for category in RATING_CATEGORIES:
        value = ratings.get(category)
        if not _is_valid_score(value):
            raise InvalidInput(RATINGS_ERROR)
        cleaned[category] = int(value)
    return cleaned


def _review_exists(booking_id):
    return Review.objects.filter(booking_id=booking_id).exists()


def _refresh_listing_rating(listing_id):
    """Run aggregation without letting its failure undo the review."""
    try:
        with transaction.atomic():
            recalculate_listing_rating(listing_id)
    except Exception:
        logger.exception(
            f"Error updating rating for listing {listing_id}; "
            f"it will be corrected on the next recalculation"
        )


def create_review(booking_id, tenant_id, ratings, text_review):
    """
    Create the review for a completed booking and refresh the listing rating.

    Args:
        booking_id: Primary key of the booking being reviewed
        tenant_id: ID of the user writing the review
        ratings: Mapping of the six category names to scores 1-5
        text_review: Written review, must not be blank

    Returns:
        Review: The created review

    Raises:
        InvalidInput: If ratings or text are missing or invalid
        NotFound: If the booking does not exist
        Forbidden: If the caller is not the booking's tenant
        InvalidState: If the booking is not completed
        Conflict: If the booking has already been reviewed
    """
    scores = validate_ratings(ratings)

    if not isinstance(text_review, str) or not text_review.strip():
        raise InvalidInput('Review text is required.')

    with transaction.atomic():
        try:
            booking = Booking.objects.select_related('listing').get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError, TypeError):
            raise NotFound('Booking not found.')

        ensure_booking_tenant(booking, tenant_id)

        if booking.status != 'completed':
            raise InvalidState(
                f'Can only review completed bookings. This booking is {booking.status}.'
            )

        if _review_exists(booking.id):
            raise Conflict('Review already exists for this booking.')

        listing = booking.listing
        review = Review(
            booking=booking,
            listing=listing,
            tenant_id=tenant_id,
            owner_id=listing.owner_id,
            text_review=text_review.strip(),
            **{rating_field(category): score for category, score in scores.items()}
        )

        # The one-to-one constraint on booking settles concurrent submissions
        try:
            with transaction.atomic():
                review.save()
        except IntegrityError:
            raise Conflict('Review already exists for this booking.')

    logger.info(
        f"Review created. Review ID: {review.id}, "
        f"Booking ID: {booking.id}, Listing ID: {listing.id}, Tenant ID: {tenant_id}"
    )

    _refresh_listing_rating(listing.id)
    return review


def reply_to_review(review_id, owner_id, reply_text):
    """
    Attach the listing owner's one-time reply to a review.

    Args:
        review_id: Primary key of the review
        owner_id: ID of the user replying
        reply_text: Reply body, must not be blank

    Returns:
        Review: The updated review

    Raises:
        InvalidInput: If the reply is empty
        NotFound: If the review does not exist
        Forbidden: If the caller is not the review's owner
        Conflict: If the review already has a reply
    """
    if not isinstance(reply_text, str) or not reply_text.strip():
        raise InvalidInput('Reply text is required.')

    with transaction.atomic():
        try:
            review = Review.objects.select_for_update().get(pk=review_id)
        except (Review.DoesNotExist, ValueError, TypeError):
            raise NotFound('Review not found.')

        ensure_review_owner(review, owner_id)

        if review.has_reply():
            raise Conflict('Already replied to this review.')

        review.owner_reply = reply_text.strip()
        review.replied_at = timezone.now()
        review.save(update_fields=['owner_reply', 'replied_at', 'updated_at'])

    logger.info(f"Owner replied to review. Review ID: {review.id}, Owner ID: {owner_id}")
    return review
