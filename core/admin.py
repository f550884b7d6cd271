"""
Django admin configuration for users, listings, bookings and reviews.
"""

import logging

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .bookings import cancel_booking, complete_booking
from .exceptions import MarketplaceError
from .models import Booking, Listing, Review, User

logger = logging.getLogger(__name__)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Extends Django's UserAdmin to include the role and mobile number.
    """

    # Fields to display in the list view
    list_display = [
        'email',
        'username',
        'user_type',
        'mobile',
        'is_staff',
        'is_active',
        'created_at',
    ]

    # Fields to filter by in the sidebar
    list_filter = [
        'user_type',
        'is_staff',
        'is_superuser',
        'is_active',
        'created_at',
    ]

    # Fields to search
    search_fields = [
        'email',
        'username',
        'first_name',
        'last_name',
        'mobile',
    ]

    # Default ordering
    ordering = ['-created_at']

    # Fields to display in the detail view
    fieldsets = (
        (None, {
            'fields': ('username', 'password')
        }),
        (_('Personal Info'), {
            'fields': (
                'first_name',
                'last_name',
                'email',
                'mobile',
            )
        }),
        (_('Role'), {
            'fields': ('user_type',)
        }),
        (_('Permissions'), {
            'fields': (
                'is_active',
                'is_staff',
                'is_superuser',
                'groups',
                'user_permissions',
            ),
            'classes': ('collapse',),
        }),
        (_('Important Dates'), {
            'fields': ('last_login', 'date_joined', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    # Fields to display when adding a new user
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'username',
                'email',
                'password1',
                'password2',
                'user_type',
                'mobile',
            ),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login', 'date_joined']

    date_hierarchy = 'created_at'

    list_per_page = 25

    def get_readonly_fields(self, request, obj=None):
        if obj:  # Editing an existing object
            return self.readonly_fields
        return []


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    """
    Admin interface for Listing model.

    total_ratings and average_rating are derived from reviews and are
    never edited by hand; run the recalculate_ratings command to repair them.
    """

    list_display = [
        'title',
        'owner',
        'city',
        'listing_type',
        'rent',
        'total_ratings',
        'average_rating',
        'created_at',
    ]

    list_filter = [
        'city',
        'listing_type',
        'gender_allowed',
        'created_at',
    ]

    search_fields = [
        'title',
        'address',
        'owner__email',
        'owner__username',
    ]

    readonly_fields = ['total_ratings', 'average_rating', 'created_at', 'updated_at']

    ordering = ['-created_at']

    list_per_page = 25

    fieldsets = (
        (None, {
            'fields': ('owner', 'title', 'description')
        }),
        (_('Location & Type'), {
            'fields': ('address', 'city', 'listing_type', 'gender_allowed')
        }),
        (_('Pricing'), {
            'fields': ('rent', 'deposit')
        }),
        (_('Ratings'), {
            'fields': ('total_ratings', 'average_rating')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    """
    Admin interface for Booking model.

    Status changes go through the booking lifecycle actions so the
    transition rules apply here too; the status field itself is read-only.
    """

    list_display = [
        'id',
        'listing',
        'tenant',
        'status',
        'move_in_date',
        'created_at',
    ]

    list_filter = [
        'status',
        'move_in_date',
        'created_at',
    ]

    search_fields = [
        'listing__title',
        'tenant__email',
        'tenant__username',
    ]

    readonly_fields = ['status', 'created_at', 'updated_at']

    ordering = ['-created_at']

    date_hierarchy = 'move_in_date'

    list_per_page = 25

    actions = ['mark_completed', 'mark_cancelled']

    def _run_transition(self, request, queryset, operation, label):
        updated = 0
        for booking in queryset:
            try:
                operation(booking.id)
            except MarketplaceError as e:
                self.message_user(
                    request,
                    f"Booking {booking.id} was not {label}: {e.message}",
                    level=messages.WARNING,
                )
                continue
            updated += 1

        logger.info(
            f"Admin action: {updated} booking(s) {label} by {request.user.email}"
        )
        if updated:
            self.message_user(request, f"{updated} booking(s) {label}.", level=messages.SUCCESS)

    @admin.action(description=_('Mark selected accepted bookings as completed'))
    def mark_completed(self, request, queryset):
        self._run_transition(request, queryset, complete_booking, 'completed')

    @admin.action(description=_('Cancel selected accepted bookings'))
    def mark_cancelled(self, request, queryset):
        self._run_transition(request, queryset, cancel_booking, 'cancelled')


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for Review model."""

    list_display = [
        'id',
        'listing',
        'tenant',
        'owner',
        'booking',
        'created_at',
        'replied_at',
    ]

    list_filter = [
        'created_at',
        'replied_at',
    ]

    search_fields = [
        'listing__title',
        'tenant__email',
        'tenant__username',
        'text_review',
    ]

    readonly_fields = [
        'booking',
        'listing',
        'tenant',
        'owner',
        'food_rating',
        'cleanliness_rating',
        'safety_rating',
        'owner_rating',
        'facilities_rating',
        'study_rating',
        'text_review',
        'owner_reply',
        'created_at',
        'updated_at',
        'replied_at',
    ]

    ordering = ['-created_at']

    date_hierarchy = 'created_at'

    list_per_page = 25

    fieldsets = (
        (None, {
            'fields': ('booking', 'listing', 'tenant', 'owner')
        }),
        (_('Ratings'), {
            'fields': (
                'food_rating',
                'cleanliness_rating',
                'safety_rating',
                'owner_rating',
                'facilities_rating',
                'study_rating',
            )
        }),
        (_('Review Content'), {
            'fields': ('text_review', 'owner_reply', 'replied_at')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def has_add_permission(self, request):
        # Reviews are only created by tenants through the API
        return False
