"""
Permission classes and ownership guards for the housing marketplace.

The DRF permission classes gate routes by role. The ensure_* guards are
called by the booking and review services before any mutation and raise
Forbidden, so the same rules apply whether the caller is a view, an admin
action or a script.
"""

from rest_framework import permissions

from .exceptions import Forbidden


def _has_role(user, role):
    if not user or not user.is_authenticated:
        return False
    return getattr(user, 'user_type', None) == role


class IsTenant(permissions.BasePermission):
    """
    Permission class that allows only tenants to access the endpoint.

    Usage:
        class MyView(APIView):
            permission_classes = [IsAuthenticated, IsTenant]
    """

    message = 'Only tenants can perform this action.'

    def has_permission(self, request, view):
        return _has_role(request.user, 'tenant')


class IsOwner(permissions.BasePermission):
    """
    Permission class that allows only listing owners to access the endpoint.

    Usage:
        class MyView(APIView):
            permission_classes = [IsAuthenticated, IsOwner]
    """

    message = 'Only listing owners can perform this action.'

    def has_permission(self, request, view):
        return _has_role(request.user, 'owner')


# ============================================================================
# Ownership guards
# ============================================================================

def ensure_can_book(user):
    """
    Booking creation: caller must be an authenticated tenant.

    Raises:
        Forbidden: If the caller is anonymous or not a tenant
    """
    if user is None or not user.is_authenticated:
        raise Forbidden('Authentication is required to create a booking.')

    if not user.is_tenant():
        raise Forbidden('Only tenants can create bookings.')


def ensure_listing_owner(listing, actor_id):
    """
    Booking transition: caller must own the listing the booking refers to.

    Raises:
        Forbidden: If actor_id is not the listing's owner
    """
    if listing.owner_id != actor_id:
        raise Forbidden('Only the owner of this listing can update its bookings.')


def ensure_booking_tenant(booking, actor_id):
    """
    Review creation: caller must be the booking's tenant.

    Raises:
        Forbidden: If actor_id did not make the booking
    """
    if booking.tenant_id != actor_id:
        raise Forbidden('You can only review your own bookings.')


def ensure_review_owner(review, actor_id):
    """
    Review reply: caller must be the owner recorded on the review.

    Raises:
        Forbidden: If actor_id is not the review's owner
    """
    if review.owner_id != actor_id:
        raise Forbidden('Only the listing owner can reply to this review.')
