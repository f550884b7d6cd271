"""
Custom views for the Housing Marketplace.

Views translate HTTP requests into calls on the booking and review
services. Domain errors raised by the services are rendered by
core.exceptions.marketplace_exception_handler.
"""

import logging
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.generics import ListAPIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django.shortcuts import get_object_or_404

from .bookings import create_booking, transition_booking
from .exceptions import InvalidInput
from .models import Booking, Listing, Review
from .permissions import IsOwner, IsTenant, ensure_can_book
from .ratings import calculate_listing_rating
from .reviews import create_review, reply_to_review
from .serializers import (
    EmailTokenObtainPairSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusUpdateSerializer,
    ListingBookingSerializer,
    ListingRatingSerializer,
    ReviewCreateSerializer,
    ReviewReplySerializer,
    ReviewSerializer,
)

logger = logging.getLogger(__name__)


class EmailTokenObtainPairView(TokenObtainPairView):
    """
    Custom view to use email-based authentication instead of username.
    """
    serializer_class = EmailTokenObtainPairSerializer


class ClientIPMixin:
    """Adds client IP lookup for audit log lines."""

    def get_client_ip(self, request):
        """
        Get client IP address from request.
        Handles proxy headers for accurate IP detection.
        """
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            ip = x_forwarded_for.split(',')[0]
        else:
            ip = request.META.get('REMOTE_ADDR')
        return ip


# ============================================================================
# Booking Views
# ============================================================================

class BookingListCreateView(ClientIPMixin, ListAPIView):
    """
    API endpoint for creating booking requests and listing a listing's bookings.

    GET /api/bookings/?listing=<id>

    Public booking calendar for a listing. Only dates and statuses are
    exposed; no tenant information.

    POST /api/bookings/
    Headers: Authorization: Bearer <access_token>
    Request body: {
        "listing_id": 1,
        "move_in_date": "2025-01-01",
        "notes": "Arriving in the evening"
    }

    Success response (201): the created booking, status "pending".

    Error responses:
    - 401: Missing, invalid, or expired JWT token
    - 403: Caller is not a tenant
    - 400: Missing listing or invalid move-in date
    - 404: Listing not found
    """
    serializer_class = ListingBookingSerializer

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_queryset(self):
        listing_id = self.request.query_params.get('listing')
        if not listing_id or not listing_id.isdigit():
            raise InvalidInput('Query parameter "listing" must be a listing ID.')

        get_object_or_404(Listing, pk=listing_id)
        return Booking.objects.filter(listing_id=listing_id).order_by('move_in_date')

    def post(self, request, *args, **kwargs):
        ensure_can_book(request.user)

        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = create_booking(
            tenant=request.user,
            listing_id=serializer.validated_data['listing_id'],
            move_in_date=serializer.validated_data['move_in_date'],
            notes=serializer.validated_data.get('notes', ''),
        )

        logger.info(
            f"Booking requested via API. Booking ID: {booking.id}, "
            f"User: {request.user.email} (ID: {request.user.id}), "
            f"IP: {self.get_client_ip(request)}"
        )

        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingStatusUpdateView(ClientIPMixin, APIView):
    """
    API endpoint for the listing owner's decision on a booking.

    PUT /api/bookings/<id>/status/
    Headers: Authorization: Bearer <access_token>
    Request body: {"status": "accepted"}

    Error responses:
    - 401: Missing, invalid, or expired JWT token
    - 403: Caller does not own the booking's listing
    - 404: Booking not found
    - 400: Status is not accepted/rejected or booking is no longer pending
    """
    permission_classes = [IsAuthenticated]

    def put(self, request, *args, **kwargs):
        serializer = BookingStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        booking = transition_booking(
            booking_id=kwargs.get('pk'),
            requested_status=serializer.validated_data['status'],
            actor_id=request.user.id,
        )

        logger.info(
            f"Booking status updated via API. Booking ID: {booking.id}, "
            f"New Status: {booking.status}, "
            f"User: {request.user.email} (ID: {request.user.id}), "
            f"IP: {self.get_client_ip(request)}"
        )

        return Response(BookingSerializer(booking).data, status=status.HTTP_200_OK)

    def patch(self, request, *args, **kwargs):
        """PATCH method not allowed."""
        return Response(
            {'detail': 'Method "PATCH" not allowed.'},
            status=status.HTTP_405_METHOD_NOT_ALLOWED
        )


class OwnerBookingsView(ListAPIView):
    """
    Bookings on the authenticated owner's listings, newest first.

    GET /api/bookings/owner/?status=pending
    """
    permission_classes = [IsAuthenticated, IsOwner]
    serializer_class = BookingSerializer

    def get_queryset(self):
        queryset = Booking.objects.filter(
            listing__owner=self.request.user
        ).select_related('listing', 'tenant')

        status_filter = self.request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        return queryset.order_by('-created_at')


class TenantBookingsView(ListAPIView):
    """
    The authenticated tenant's own bookings, newest first.

    GET /api/bookings/tenant/
    """
    permission_classes = [IsAuthenticated, IsTenant]
    serializer_class = BookingSerializer

    def get_queryset(self):
        return Booking.objects.filter(
            tenant=self.request.user
        ).select_related('listing', 'tenant').order_by('-created_at')


# ============================================================================
# Review Views
# ============================================================================

class ReviewCreateView(ClientIPMixin, APIView):
    """
    API endpoint for reviewing a completed booking.

    POST /api/reviews/
    Headers: Authorization: Bearer <access_token>
    Request body: {
        "booking_id": 1,
        "ratings": {"food": 4, "cleanliness": 5, "safety": 5,
                    "owner": 4, "facilities": 4, "study": 5},
        "text_review": "Quiet and clean."
    }

    Error responses:
    - 400: Invalid ratings, empty text or booking not completed
    - 403: Caller did not make the booking
    - 404: Booking not found
    - 409: Booking already reviewed
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = create_review(
            booking_id=serializer.validated_data['booking_id'],
            tenant_id=request.user.id,
            ratings=serializer.validated_data['ratings'],
            text_review=serializer.validated_data['text_review'],
        )

        logger.info(
            f"Review submitted via API. Review ID: {review.id}, "
            f"User: {request.user.email} (ID: {request.user.id}), "
            f"IP: {self.get_client_ip(request)}"
        )

        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class ReviewReplyView(ClientIPMixin, APIView):
    """
    API endpoint for the listing owner's one-time reply to a review.

    PUT /api/reviews/<id>/reply/
    Request body: {"reply": "Thanks for staying with us."}
    """
    permission_classes = [IsAuthenticated]

    def put(self, request, *args, **kwargs):
        serializer = ReviewReplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        review = reply_to_review(
            review_id=kwargs.get('pk'),
            owner_id=request.user.id,
            reply_text=serializer.validated_data['reply'],
        )

        logger.info(
            f"Review reply saved via API. Review ID: {review.id}, "
            f"User: {request.user.email} (ID: {request.user.id}), "
            f"IP: {self.get_client_ip(request)}"
        )

        return Response(ReviewSerializer(review).data, status=status.HTTP_200_OK)


class ListingReviewsView(ListAPIView):
    """
    API endpoint for retrieving reviews for a specific listing.

    GET /api/reviews/listing/<listing_id>/

    Publicly accessible. Returns reviews ordered by creation date (newest first).
    """
    permission_classes = [AllowAny]
    serializer_class = ReviewSerializer

    def get_queryset(self):
        listing_id = self.kwargs['listing_id']

        # Ensure listing exists
        get_object_or_404(Listing, pk=listing_id)

        return Review.objects.filter(
            listing_id=listing_id
        ).select_related('tenant').order_by('-created_at', '-id')


class ListingRatingView(APIView):
    """
    API endpoint for a listing's rating summary.

    GET /api/listings/<id>/rating/

    Success response (200):
    {
        "listing_id": 1,
        "total_ratings": 2,
        "average_rating": "4.5",
        "category_averages": {"food": "4.5", ...}
    }
    """
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        listing = get_object_or_404(Listing, pk=kwargs.get('pk'))

        # Overall figures come from the stored aggregate; the category
        # breakdown is not stored and is computed on read
        serializer = ListingRatingSerializer({
            'listing_id': listing.id,
            'total_ratings': listing.total_ratings,
            'average_rating': listing.average_rating,
            'category_averages': calculate_listing_rating(listing.id).category_averages,
        })
        return Response(serializer.data, status=status.HTTP_200_OK)
