"""
Data model for the housing rental marketplace.

Users own listings or rent them, bookings track a tenant's request for a
listing, and reviews rate a completed booking across six fixed categories.
"""

from decimal import Decimal

from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from .validators import validate_mobile_number, validate_rating_score


RATING_CATEGORIES = ('food', 'cleanliness', 'safety', 'owner', 'facilities', 'study')


def rating_field(category):
    """Return the Review field name holding the score for a category."""
    return f'{category}_rating'


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Additional fields:
    - email: Required, unique email address
    - mobile: Optional mobile number with validation
    - user_type: 'tenant', 'owner' or 'admin'
    - created_at: Account creation timestamp
    - updated_at: Last update timestamp
    """

    USER_TYPE_CHOICES = [
        ('tenant', 'Tenant'),
        ('owner', 'Owner'),
        ('admin', 'Admin'),
    ]

    email = models.EmailField(
        _('email address'),
        unique=True,
        blank=False,
        null=False,
        error_messages={
            'unique': _('A user with that email already exists.'),
        },
        help_text=_('Required. Enter a valid email address.')
    )

    mobile = models.CharField(
        _('mobile number'),
        max_length=20,
        blank=True,
        default='',
        validators=[validate_mobile_number],
        help_text=_('Optional. Bangladeshi mobile number, e.g. 01712345678.')
    )

    user_type = models.CharField(
        _('user type'),
        max_length=10,
        choices=USER_TYPE_CHOICES,
        default='tenant',
        help_text=_('Whether the account rents, owns listings or administers the site.')
    )

    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True,
        help_text=_('Timestamp when the account was created.')
    )

    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True,
        help_text=_('Timestamp when the account was last updated.')
    )

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_type'], name='core_user_user_ty_4f5d1c_idx'),
        ]

    def __str__(self):
        """Return email as string representation."""
        return self.email or self.username

    def is_tenant(self):
        return self.user_type == 'tenant'

    def is_owner(self):
        return self.user_type == 'owner'

    def is_admin(self):
        """Admins are either flagged by role or Django superusers."""
        return self.user_type == 'admin' or self.is_superuser

    @property
    def role(self):
        return 'admin' if self.is_superuser else self.user_type

    def clean(self):
        """
        Validate model fields.

        Ensures:
        - Email is provided and lowercase for case-insensitive uniqueness

        Raises:
            ValidationError: If validation fails
        """
        super().clean()

        if self.email:
            self.email = self.email.lower()

        if not self.email:
            raise ValidationError({
                'email': _('Email address is required.')
            })

    def save(self, *args, **kwargs):
        # Normalize email to lowercase
        if self.email:
            self.email = self.email.lower()
        super().save(*args, **kwargs)


class Listing(models.Model):
    """
    A rentable mess or hostel seat owned by an owner-role user.

    Only the fields the booking and review core depends on carry logic:
    - owner: the user allowed to accept or reject bookings
    - total_ratings / average_rating: aggregate derived from reviews,
      rewritten by core.ratings and never edited directly
    """

    CITY_CHOICES = [
        ('Dhaka', 'Dhaka'),
        ('Chittagong', 'Chittagong'),
        ('Sylhet', 'Sylhet'),
        ('Khulna', 'Khulna'),
        ('Rajshahi', 'Rajshahi'),
        ('Barisal', 'Barisal'),
    ]

    TYPE_CHOICES = [
        ('mess', 'Mess'),
        ('hostel', 'Hostel'),
    ]

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('both', 'Both'),
    ]

    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='listings',
        help_text=_('Owner of this listing')
    )

    title = models.CharField(
        _('title'),
        max_length=200,
        help_text=_('Title of the listing')
    )

    address = models.CharField(
        _('address'),
        max_length=300,
        help_text=_('Street address of the property')
    )

    city = models.CharField(
        _('city'),
        max_length=20,
        choices=CITY_CHOICES,
        help_text=_('City the property is located in')
    )

    listing_type = models.CharField(
        _('listing type'),
        max_length=10,
        choices=TYPE_CHOICES,
        help_text=_('Mess or hostel')
    )

    rent = models.DecimalField(
        _('rent'),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text=_('Monthly rent')
    )

    deposit = models.DecimalField(
        _('deposit'),
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text=_('Security deposit')
    )

    gender_allowed = models.CharField(
        _('gender allowed'),
        max_length=10,
        choices=GENDER_CHOICES,
        default='both',
    )

    description = models.TextField(
        _('description'),
        blank=True,
        default='',
    )

    total_ratings = models.PositiveIntegerField(
        _('total ratings'),
        default=0,
        help_text=_('Number of reviews contributing to the average rating')
    )

    average_rating = models.DecimalField(
        _('average rating'),
        max_digits=2,
        decimal_places=1,
        default=Decimal('0.0'),
        validators=[
            MinValueValidator(Decimal('0.0'), message=_('Rating cannot be negative.')),
            MaxValueValidator(Decimal('5.0'), message=_('Rating cannot exceed 5.0.'))
        ],
        help_text=_('Overall rating from 0.0 to 5.0')
    )

    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True,
    )

    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True,
    )

    class Meta:
        verbose_name = _('listing')
        verbose_name_plural = _('listings')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner'], name='core_listin_owner_i_9b2e0a_idx'),
            models.Index(fields=['city'], name='core_listin_city_3c1f7d_idx'),
            models.Index(fields=['average_rating'], name='core_listin_average_5e8a42_idx'),
        ]

    def __str__(self):
        return self.title

    def clean(self):
        """
        Validate model fields.

        Ensures:
        - Owner is a user with user_type='owner'
        - Title and address are not blank

        Raises:
            ValidationError: If validation fails
        """
        super().clean()

        if self.owner_id and not self.owner.is_owner():
            raise ValidationError({
                'owner': _('Only users with user_type="owner" can own listings.')
            })

        if not self.title or not self.title.strip():
            raise ValidationError({
                'title': _('Title cannot be empty.')
            })

        if not self.address or not self.address.strip():
            raise ValidationError({
                'address': _('Address cannot be empty.')
            })

    def save(self, *args, **kwargs):
        """Run full_clean before saving."""
        self.full_clean()
        super().save(*args, **kwargs)


class Booking(models.Model):
    """
    A tenant's request to rent a listing from a move-in date.

    Fields:
    - listing: Listing being requested
    - tenant: User making the request
    - status: pending, accepted, rejected, completed or cancelled
    - move_in_date: Requested move-in date
    - notes: Optional message to the owner
    - created_at: Creation timestamp
    - updated_at: Last update timestamp
    """

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    # Owner decisions leave pending; completion and cancellation leave accepted.
    VALID_TRANSITIONS = {
        'pending': ['accepted', 'rejected'],
        'accepted': ['completed', 'cancelled'],
        'rejected': [],
        'completed': [],
        'cancelled': [],
    }

    listing = models.ForeignKey(
        Listing,
        on_delete=models.CASCADE,
        related_name='bookings',
        help_text=_('Listing being booked')
    )

    tenant = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='tenant_bookings',
        help_text=_('Tenant making the booking')
    )

    status = models.CharField(
        _('status'),
        max_length=20,
        choices=STATUS_CHOICES,
        default='pending',
        help_text=_('Current status of the booking')
    )

    move_in_date = models.DateField(
        _('move-in date'),
        help_text=_('Date the tenant wants to move in')
    )

    notes = models.TextField(
        _('notes'),
        blank=True,
        default='',
        help_text=_('Optional message to the owner')
    )

    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True,
    )

    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True,
    )

    class Meta:
        verbose_name = _('booking')
        verbose_name_plural = _('bookings')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['listing'], name='core_bookin_listing_7d3a91_idx'),
            models.Index(fields=['tenant'], name='core_bookin_tenant__2a6c4e_idx'),
            models.Index(fields=['status'], name='core_bookin_status_0f9b3d_idx'),
            models.Index(fields=['move_in_date'], name='core_bookin_move_in_6e1d58_idx'),
        ]

    def __str__(self):
        return f"Booking #{self.pk} by {self.tenant} for {self.listing} ({self.status})"

    def is_terminal(self):
        return not self.VALID_TRANSITIONS.get(self.status)

    def can_transition_to(self, new_status):
        """
        Validate if booking can transition to new status.

        Valid transitions:
        - pending -> accepted | rejected (listing owner)
        - accepted -> completed | cancelled (trusted process)
        - rejected, completed, cancelled -> (terminal)

        Args:
            new_status: Target status to transition to

        Returns:
            tuple: (is_valid: bool, error_message: str or None)
        """
        current_status = self.status

        if self.is_terminal():
            return False, f'Cannot modify a {current_status} booking.'

        if new_status in self.VALID_TRANSITIONS[current_status]:
            return True, None

        if current_status == 'accepted' and new_status in ('accepted', 'rejected'):
            return False, 'This booking has already been decided.'

        return False, f'Invalid status transition from {current_status} to {new_status}.'

    def save(self, *args, **kwargs):
        """Run full_clean before saving."""
        self.full_clean()
        super().save(*args, **kwargs)


class Review(models.Model):
    """
    A tenant's six-category rating and written review of a completed booking.

    Fields:
    - booking: Booking being reviewed (one review per booking)
    - listing: Listing the booking was for
    - tenant: Author of the review
    - owner: Listing owner at the time the review was written
    - <category>_rating: Integer 1-5 for each of RATING_CATEGORIES
    - text_review: Written review
    - owner_reply / replied_at: One-time response from the owner
    """

    booking = models.OneToOneField(
        Booking,
        on_delete=models.CASCADE,
        related_name='review',
        help_text=_('Booking being reviewed (one review per booking)')
    )

    listing = models.ForeignKey(
        Listing,
        on_delete=models.CASCADE,
        related_name='reviews',
        help_text=_('Listing being reviewed')
    )

    tenant = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='reviews_given',
        help_text=_('Tenant writing the review')
    )

    # Snapshot of listing.owner; later ownership changes do not rewrite it.
    owner = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='reviews_received',
        help_text=_('Owner of the listing when the review was written')
    )

    food_rating = models.PositiveSmallIntegerField(
        _('food rating'),
        validators=[validate_rating_score],
    )

    cleanliness_rating = models.PositiveSmallIntegerField(
        _('cleanliness rating'),
        validators=[validate_rating_score],
    )

    safety_rating = models.PositiveSmallIntegerField(
        _('safety rating'),
        validators=[validate_rating_score],
    )

    owner_rating = models.PositiveSmallIntegerField(
        _('owner rating'),
        validators=[validate_rating_score],
    )

    facilities_rating = models.PositiveSmallIntegerField(
        _('facilities rating'),
        validators=[validate_rating_score],
    )

    study_rating = models.PositiveSmallIntegerField(
        _('study environment rating'),
        validators=[validate_rating_score],
    )

    text_review = models.TextField(
        _('review text'),
        help_text=_('Written feedback about the stay')
    )

    owner_reply = models.TextField(
        _('owner reply'),
        null=True,
        blank=True,
        help_text=_('Reply from the listing owner (can be set once)')
    )

    replied_at = models.DateTimeField(
        _('replied at'),
        null=True,
        blank=True,
    )

    created_at = models.DateTimeField(
        _('created at'),
        auto_now_add=True,
    )

    updated_at = models.DateTimeField(
        _('updated at'),
        auto_now=True,
    )

    class Meta:
        verbose_name = _('review')
        verbose_name_plural = _('reviews')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['listing'], name='core_review_listing_4b8e27_idx'),
            models.Index(fields=['tenant'], name='core_review_tenant__8c5f10_idx'),
            models.Index(fields=['owner'], name='core_review_owner_i_1d7a63_idx'),
            models.Index(fields=['created_at'], name='core_review_created_a9e2b4_idx'),
        ]

    def __str__(self):
        return f"Review by {self.tenant} for {self.listing}"

    @property
    def ratings(self):
        """Category scores as a dict keyed by category name."""
        return {category: getattr(self, rating_field(category)) for category in RATING_CATEGORIES}

    def has_reply(self):
        return bool(self.owner_reply)

    def clean(self):
        """
        Validate model fields.

        Ensures:
        - Booking is completed and belongs to the review's tenant
        - Text review is not blank

        Raises:
            ValidationError: If validation fails
        """
        super().clean()

        if self.booking_id:
            if self.booking.status != 'completed':
                raise ValidationError({
                    'booking': _('Only completed bookings can be reviewed.')
                })

            if self.tenant_id and self.tenant_id != self.booking.tenant_id:
                raise ValidationError({
                    'tenant': _('Only the tenant of the booking can review it.')
                })

        if not self.text_review or not self.text_review.strip():
            raise ValidationError({
                'text_review': _('Review text cannot be empty.')
            })
