"""
Comprehensive tests for the booking status update endpoint and the
owner/tenant booking lists.

Test Coverage:
- Owner accepts or rejects pending bookings
- Decisions are final (InvalidState on a second decision)
- Only the listing owner may decide (Forbidden for everyone else)
- Status values outside accepted/rejected are InvalidInput
- Missing bookings, unauthenticated requests
"""

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.bookings import transition_booking
from core.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from core.models import Booking, Listing

User = get_user_model()


class BookingStatusUpdateTestCase(TestCase):
    """Test suite for PUT /api/bookings/<id>/status/."""

    def setUp(self):
        """Set up test fixtures for each test."""
        self.client = APIClient()

        self.owner = User.objects.create_user(
            username='owner',
            email='owner@example.com',
            password='testpass123',
            user_type='owner'
        )
        self.other_owner = User.objects.create_user(
            username='otherowner',
            email='otherowner@example.com',
            password='testpass123',
            user_type='owner'
        )
        self.tenant = User.objects.create_user(
            username='tenant',
            email='tenant@example.com',
            password='testpass123',
            user_type='tenant'
        )

        self.listing = Listing.objects.create(
            owner=self.owner,
            title='Lake View Mess',
            address='12 Road 5, Dhanmondi',
            city='Dhaka',
            listing_type='mess',
            rent=Decimal('4500.00')
        )

        self.owner_token = str(RefreshToken.for_user(self.owner).access_token)
        self.other_owner_token = str(RefreshToken.for_user(self.other_owner).access_token)
        self.tenant_token = str(RefreshToken.for_user(self.tenant).access_token)

    def _create_booking(self, status='pending'):
        """Helper method to create a booking."""
        return Booking.objects.create(
            listing=self.listing,
            tenant=self.tenant,
            move_in_date=date(2025, 1, 1),
            status=status
        )

    def _url(self, booking_id):
        return f'/api/bookings/{booking_id}/status/'

    # ========================================================================
    # Valid Transition Tests
    # ========================================================================

    def test_owner_can_accept_pending_booking(self):
        booking = self._create_booking()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.put(self._url(booking.id), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'accepted')
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'accepted')

    def test_owner_can_reject_pending_booking(self):
        booking = self._create_booking()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.put(self._url(booking.id), {'status': 'rejected'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'rejected')

    # ========================================================================
    # Invalid Transition Tests
    # ========================================================================

    def test_accepted_booking_cannot_be_rejected(self):
        booking = self._create_booking('accepted')
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.put(self._url(booking.id), {'status': 'rejected'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_state')
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'accepted')

    def test_decided_bookings_always_fail_with_invalid_state(self):
        for current in ('accepted', 'rejected', 'completed', 'cancelled'):
            booking = self._create_booking(current)
            for requested in ('accepted', 'rejected'):
                with self.assertRaises(InvalidState):
                    transition_booking(booking.id, requested, self.owner.id)
            booking.refresh_from_db()
            self.assertEqual(booking.status, current)

    def test_owner_cannot_complete_booking_directly(self):
        booking = self._create_booking('accepted')
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.put(self._url(booking.id), {'status': 'completed'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_input')
        self.assertEqual(
            response.data['detail'],
            'Invalid status. Must be one of: accepted, rejected.'
        )
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'accepted')

    def test_unknown_status_is_invalid_input(self):
        booking = self._create_booking()
        with self.assertRaises(InvalidInput):
            transition_booking(booking.id, 'confirmed', self.owner.id)

    # ========================================================================
    # Authorization Tests
    # ========================================================================

    def test_other_owner_is_forbidden(self):
        booking = self._create_booking()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.other_owner_token}')

        response = self.client.put(self._url(booking.id), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'forbidden')
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'pending')

    def test_tenant_cannot_accept_own_booking(self):
        booking = self._create_booking()
        with self.assertRaises(Forbidden):
            transition_booking(booking.id, 'accepted', self.tenant.id)
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'pending')

    def test_unauthenticated_request_rejected(self):
        booking = self._create_booking()

        response = self.client.put(self._url(booking.id), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    # ========================================================================
    # Edge Cases
    # ========================================================================

    def test_missing_booking_returns_404(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.put(self._url(999999), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_missing_booking_raises_not_found(self):
        with self.assertRaises(NotFound):
            transition_booking(999999, 'accepted', self.owner.id)

    def test_patch_not_allowed(self):
        booking = self._create_booking()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')

        response = self.client.patch(self._url(booking.id), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)


class BookingListViewsTestCase(TestCase):
    """Test suite for the owner, tenant and public booking lists."""

    def setUp(self):
        self.client = APIClient()

        self.owner = User.objects.create_user(
            username='owner',
            email='owner@example.com',
            password='testpass123',
            user_type='owner'
        )
        self.other_owner = User.objects.create_user(
            username='otherowner',
            email='otherowner@example.com',
            password='testpass123',
            user_type='owner'
        )
        self.tenant = User.objects.create_user(
            username='tenant',
            email='tenant@example.com',
            password='testpass123',
            user_type='tenant'
        )
        self.other_tenant = User.objects.create_user(
            username='othertenant',
            email='othertenant@example.com',
            password='testpass123',
            user_type='tenant'
        )

        self.listing = Listing.objects.create(
            owner=self.owner,
            title='Lake View Mess',
            address='12 Road 5, Dhanmondi',
            city='Dhaka',
            listing_type='mess',
            rent=Decimal('4500.00')
        )
        self.other_listing = Listing.objects.create(
            owner=self.other_owner,
            title='Hill Hostel',
            address='4 Station Road',
            city='Chittagong',
            listing_type='hostel',
            rent=Decimal('3500.00')
        )

        self.booking = Booking.objects.create(
            listing=self.listing, tenant=self.tenant, move_in_date=date(2025, 1, 1)
        )
        self.accepted = Booking.objects.create(
            listing=self.listing, tenant=self.other_tenant,
            move_in_date=date(2025, 2, 1), status='accepted'
        )
        self.elsewhere = Booking.objects.create(
            listing=self.other_listing, tenant=self.tenant, move_in_date=date(2025, 3, 1)
        )

    def _auth(self, user):
        token = str(RefreshToken.for_user(user).access_token)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def test_owner_sees_bookings_on_own_listings(self):
        self._auth(self.owner)
        response = self.client.get('/api/bookings/owner/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = {item['id'] for item in response.data['results']}
        self.assertEqual(ids, {self.booking.id, self.accepted.id})

    def test_owner_can_filter_by_status(self):
        self._auth(self.owner)
        response = self.client.get('/api/bookings/owner/', {'status': 'pending'})

        ids = [item['id'] for item in response.data['results']]
        self.assertEqual(ids, [self.booking.id])

    def test_tenant_cannot_use_owner_list(self):
        self._auth(self.tenant)
        response = self.client.get('/api/bookings/owner/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_tenant_sees_only_own_bookings(self):
        self._auth(self.tenant)
        response = self.client.get('/api/bookings/tenant/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = {item['id'] for item in response.data['results']}
        self.assertEqual(ids, {self.booking.id, self.elsewhere.id})

    def test_public_listing_calendar_hides_tenants(self):
        response = self.client.get('/api/bookings/', {'listing': self.listing.id})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        results = response.data['results']
        self.assertEqual([item['id'] for item in results], [self.booking.id, self.accepted.id])
        self.assertNotIn('tenant', results[0])

    def test_public_listing_calendar_requires_listing(self):
        response = self.client.get('/api/bookings/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_input')

    def test_public_listing_calendar_unknown_listing(self):
        response = self.client.get('/api/bookings/', {'listing': 999999})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')
