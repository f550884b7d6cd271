"""
URL configuration for the housing_marketplace project.
"""
from django.contrib import admin
from django.urls import path
from rest_framework_simplejwt.views import (
    TokenRefreshView,
    TokenBlacklistView,
)
from core.views import (
    EmailTokenObtainPairView,
    BookingListCreateView,
    BookingStatusUpdateView,
    OwnerBookingsView,
    TenantBookingsView,
    ReviewCreateView,
    ReviewReplyView,
    ListingReviewsView,
    ListingRatingView,
)


urlpatterns = [
    path('admin/', admin.site.urls),

    # Booking endpoints
    path('api/bookings/', BookingListCreateView.as_view(), name='booking_list_create'),
    path('api/bookings/owner/', OwnerBookingsView.as_view(), name='owner_bookings'),
    path('api/bookings/tenant/', TenantBookingsView.as_view(), name='tenant_bookings'),
    path('api/bookings/<int:pk>/status/', BookingStatusUpdateView.as_view(), name='booking_status_update'),

    # Review endpoints
    path('api/reviews/', ReviewCreateView.as_view(), name='review_create'),
    path('api/reviews/<int:pk>/reply/', ReviewReplyView.as_view(), name='review_reply'),
    path('api/reviews/listing/<int:listing_id>/', ListingReviewsView.as_view(), name='listing_reviews'),

    # Listing endpoints
    path('api/listings/<int:pk>/rating/', ListingRatingView.as_view(), name='listing_rating'),

    # JWT Authentication endpoints
    path('api/token/', EmailTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/token/blacklist/', TokenBlacklistView.as_view(), name='token_blacklist'),
]
