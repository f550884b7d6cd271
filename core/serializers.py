"""
Serializers for authentication, bookings, reviews and listing ratings.
"""

from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework import serializers
from django.contrib.auth import get_user_model

from core.models import Booking, Listing, Review, RATING_CATEGORIES

User = get_user_model()


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Custom serializer to use email instead of username for authentication.

    Access tokens carry the user's role so clients can route by it.
    """
    username_field = 'email'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Remove username field and ensure email field exists
        if 'username' in self.fields:
            del self.fields['username']
        if 'email' not in self.fields:
            self.fields['email'] = serializers.EmailField()

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        return token


# ============================================================================
# Nested Serializers
# ============================================================================

class MarketplaceUserSerializer(serializers.ModelSerializer):
    """
    Nested serializer for user information in booking and review responses.

    Fields:
    - id: User ID
    - name: Full name, falling back to the username
    - email: User email address
    """

    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


class ListingSummarySerializer(serializers.ModelSerializer):
    """
    Nested serializer for listing information in booking responses.

    Includes the derived rating fields so clients never compute them.
    """

    class Meta:
        model = Listing
        fields = [
            'id',
            'title',
            'address',
            'city',
            'listing_type',
            'rent',
            'owner',
            'total_ratings',
            'average_rating',
        ]
        read_only_fields = fields


# ============================================================================
# Booking Serializers
# ============================================================================

class BookingCreateSerializer(serializers.Serializer):
    """
    Input serializer for booking requests.

    Only checks the request shape. Date parsing, listing lookup and role
    checks happen in core.bookings.create_booking.

    Fields:
    - listing_id: Required, listing to book
    - move_in_date: Required, ISO date or datetime
    - notes: Optional message to the owner
    """

    listing_id = serializers.IntegerField(required=True)
    move_in_date = serializers.CharField(required=True, allow_blank=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=2000)


class BookingSerializer(serializers.ModelSerializer):
    """
    Full booking representation returned to tenants and owners.

    Fields:
    - id, status, move_in_date, notes, created_at, updated_at
    - listing: Nested listing summary
    - tenant: Nested tenant information
    """

    listing = ListingSummarySerializer(read_only=True)
    tenant = MarketplaceUserSerializer(read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id',
            'listing',
            'tenant',
            'status',
            'move_in_date',
            'notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ListingBookingSerializer(serializers.ModelSerializer):
    """
    Public view of a listing's bookings: dates and statuses only.
    """

    class Meta:
        model = Booking
        fields = ['id', 'status', 'move_in_date', 'created_at']
        read_only_fields = fields


class BookingStatusUpdateSerializer(serializers.Serializer):
    """
    Input serializer for owner decisions on a booking.

    The allowed values and transition rules are enforced by
    core.bookings.transition_booking.
    """

    status = serializers.CharField(required=True)


# ============================================================================
# Review Serializers
# ============================================================================

class ReviewCreateSerializer(serializers.Serializer):
    """
    Input serializer for review submissions.

    Fields:
    - booking_id: Required, completed booking being reviewed
    - ratings: Required, object with the six category scores
    - text_review: Required, written review

    Ratings are passed through untouched so core.reviews.validate_ratings
    reports every range problem with the same message.
    """

    booking_id = serializers.IntegerField(required=True)
    ratings = serializers.JSONField(required=True)
    text_review = serializers.CharField(required=True, allow_blank=False)


class ReviewSerializer(serializers.ModelSerializer):
    """
    Review representation for listing pages and API responses.

    Fields:
    - id, booking, listing, owner: Identifiers
    - tenant: Nested author information
    - ratings: Object mapping each category to its score
    - text_review, owner_reply, replied_at, created_at
    """

    tenant = MarketplaceUserSerializer(read_only=True)
    ratings = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            'id',
            'booking',
            'listing',
            'tenant',
            'owner',
            'ratings',
            'text_review',
            'owner_reply',
            'replied_at',
            'created_at',
        ]
        read_only_fields = fields

    def get_ratings(self, obj):
        return obj.ratings


class ReviewReplySerializer(serializers.Serializer):
    """Input serializer for an owner's reply to a review."""

    reply = serializers.CharField(required=True, allow_blank=False)


# ============================================================================
# Listing Rating Serializers
# ============================================================================

class ListingRatingSerializer(serializers.Serializer):
    """
    Serializer for a listing's rating summary.

    Fields:
    - listing_id: Listing the summary belongs to
    - total_ratings: Number of reviews
    - average_rating: Overall rating (one decimal place)
    - category_averages: Per-category rounded means
    """

    listing_id = serializers.IntegerField()
    total_ratings = serializers.IntegerField()
    average_rating = serializers.DecimalField(max_digits=2, decimal_places=1)
    category_averages = serializers.SerializerMethodField()

    def get_category_averages(self, obj):
        averages = obj['category_averages']
        return {category: str(averages[category]) for category in RATING_CATEGORIES}
