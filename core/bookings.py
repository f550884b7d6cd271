"""
Booking lifecycle operations.

A booking starts pending; the listing owner accepts or rejects it once, and
an accepted booking is later completed or cancelled by a trusted process
(the complete_bookings command or an admin action). Rejected, completed and
cancelled bookings are terminal.
"""

import datetime
import logging

from django.db import transaction
from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidInput, InvalidState, NotFound
from .models import Booking, Listing
from .permissions import ensure_can_book, ensure_listing_owner

logger = logging.getLogger(__name__)

OWNER_DECISIONS = ('accepted', 'rejected')


def parse_move_in_date(value):
    """
    Coerce a move-in date from a date, datetime or ISO 8601 string.

    Raises:
        InvalidInput: If the value is missing or cannot be parsed
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value

    if not value or not isinstance(value, str):
        raise InvalidInput('Move-in date is required.')

    value = value.strip()
    try:
        parsed = parse_date(value)
        if parsed is None:
            parsed_datetime = parse_datetime(value)
            parsed = parsed_datetime.date() if parsed_datetime else None
    except ValueError:
        # Well-formed but impossible dates such as 2025-02-30
        parsed = None

    if parsed is None:
        raise InvalidInput('Move-in date must be a valid date (YYYY-MM-DD).')
    return parsed


def create_booking(tenant, listing_id, move_in_date, notes=''):
    """
    Create a pending booking request for a listing.

    Args:
        tenant: Authenticated user making the request
        listing_id: Primary key of the listing to book
        move_in_date: Requested move-in date (date or ISO string)
        notes: Optional message to the owner

    Returns:
        Booking: The new booking, status 'pending'

    Raises:
        Forbidden: If the caller is not a tenant
        InvalidInput: If listing_id or move_in_date is missing or malformed
        NotFound: If the listing does not exist
    """
    ensure_can_book(tenant)

    if listing_id in (None, ''):
        raise InvalidInput('Listing ID and move-in date are required.')
    move_in_date = parse_move_in_date(move_in_date)

    try:
        listing = Listing.objects.get(pk=listing_id)
    except (Listing.DoesNotExist, ValueError, TypeError):
        raise NotFound('Listing not found.')

    booking = Booking.objects.create(
        listing=listing,
        tenant=tenant,
        move_in_date=move_in_date,
        notes=(notes or '').strip(),
        status='pending',
    )

    logger.info(
        f"Booking created. Booking ID: {booking.id}, "
        f"Listing ID: {listing.id}, Tenant ID: {tenant.id}, "
        f"Move-in Date: {move_in_date}"
    )
    return booking


def _get_locked_booking(booking_id):
    try:
        return Booking.objects.select_for_update().select_related('listing').get(pk=booking_id)
    except (Booking.DoesNotExist, ValueError, TypeError):
        raise NotFound('Booking not found.')


def _apply_transition(booking, new_status):
    is_valid, error_message = booking.can_transition_to(new_status)
    if not is_valid:
        raise InvalidState(error_message)

    old_status = booking.status
    booking.status = new_status
    booking.save(update_fields=['status', 'updated_at'])

    logger.info(
        f"Booking status updated. Booking ID: {booking.id}, "
        f"Old Status: {old_status}, New Status: {new_status}"
    )
    return booking


def transition_booking(booking_id, requested_status, actor_id):
    """
    Accept or reject a pending booking on behalf of the listing owner.

    Args:
        booking_id: Primary key of the booking
        requested_status: 'accepted' or 'rejected'
        actor_id: ID of the user requesting the change

    Returns:
        Booking: The updated booking

    Raises:
        InvalidInput: If requested_status is not accepted/rejected
        NotFound: If the booking does not exist
        Forbidden: If the actor does not own the booking's listing
        InvalidState: If the booking is no longer pending
    """
    if requested_status not in OWNER_DECISIONS:
        raise InvalidInput(
            f"Invalid status. Must be one of: {', '.join(OWNER_DECISIONS)}."
        )

    with transaction.atomic():
        booking = _get_locked_booking(booking_id)
        ensure_listing_owner(booking.listing, actor_id)

        if booking.status != 'pending':
            raise InvalidState(
                f'Only pending bookings can be {requested_status}. This booking is {booking.status}.'
            )

        return _apply_transition(booking, requested_status)


def complete_booking(booking_id):
    """
    Mark an accepted booking as completed.

    Trusted operation with no actor check; callers are the
    complete_bookings management command and the admin site.

    Raises:
        NotFound: If the booking does not exist
        InvalidState: If the booking is not accepted
    """
    with transaction.atomic():
        booking = _get_locked_booking(booking_id)
        return _apply_transition(booking, 'completed')


def cancel_booking(booking_id):
    """
    Cancel an accepted booking. Trusted operation, see complete_booking().

    Raises:
        NotFound: If the booking does not exist
        InvalidState: If the booking is not accepted
    """
    with transaction.atomic():
        booking = _get_locked_booking(booking_id)
        return _apply_transition(booking, 'cancelled')
