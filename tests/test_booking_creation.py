"""
Tests for booking creation.

Test Coverage:
- Tenants can request bookings through the API and the service
- Role checks (owners, anonymous users)
- Input validation (missing listing, malformed dates)
- Unknown listings
"""

from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from core.bookings import create_booking, parse_move_in_date
from core.exceptions import Forbidden, InvalidInput, NotFound
from core.models import Booking, Listing

User = get_user_model()


class BookingCreationAPITestCase(TestCase):
    """Test suite for POST /api/bookings/."""

    def setUp(self):
        self.client = APIClient()
        self.url = '/api/bookings/'

        self.owner = User.objects.create_user(
            username='owner',
            email='owner@example.com',
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

        self.tenant_token = str(RefreshToken.for_user(self.tenant).access_token)
        self.owner_token = str(RefreshToken.for_user(self.owner).access_token)

    def test_tenant_creates_pending_booking(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.tenant_token}')
        response = self.client.post(self.url, {
            'listing_id': self.listing.id,
            'move_in_date': '2025-01-01',
            'notes': 'Arriving in the evening'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(response.data['move_in_date'], '2025-01-01')
        self.assertEqual(response.data['listing']['id'], self.listing.id)
        self.assertEqual(response.data['tenant']['id'], self.tenant.id)

        booking = Booking.objects.get(pk=response.data['id'])
        self.assertEqual(booking.tenant, self.tenant)
        self.assertEqual(booking.notes, 'Arriving in the evening')

    def test_datetime_move_in_date_is_accepted(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.tenant_token}')
        response = self.client.post(self.url, {
            'listing_id': self.listing.id,
            'move_in_date': '2025-03-15T10:00:00Z'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['move_in_date'], '2025-03-15')

    def test_owner_cannot_create_booking(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.owner_token}')
        response = self.client.post(self.url, {
            'listing_id': self.listing.id,
            'move_in_date': '2025-01-01'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'forbidden')
        self.assertEqual(response.data['detail'], 'Only tenants can create bookings.')
        self.assertEqual(Booking.objects.count(), 0)

    def test_unauthenticated_request_rejected(self):
        response = self.client.post(self.url, {
            'listing_id': self.listing.id,
            'move_in_date': '2025-01-01'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(Booking.objects.count(), 0)

    def test_unknown_listing_returns_404(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.tenant_token}')
        response = self.client.post(self.url, {
            'listing_id': 999999,
            'move_in_date': '2025-01-01'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_malformed_date_returns_400(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.tenant_token}')
        response = self.client.post(self.url, {
            'listing_id': self.listing.id,
            'move_in_date': 'next tuesday'
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_input')
        self.assertEqual(Booking.objects.count(), 0)

    def test_missing_fields_return_400(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.tenant_token}')
        response = self.client.post(self.url, {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_input')
        self.assertIn('listing_id', response.data['errors'])
        self.assertIn('move_in_date', response.data['errors'])


class CreateBookingServiceTestCase(TestCase):
    """Test suite for core.bookings.create_booking."""

    def setUp(self):
        self.owner = User.objects.create_user(
            username='owner',
            email='owner@example.com',
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
            title='Campus Hostel',
            address='Road 2, Zindabazar',
            city='Sylhet',
            listing_type='hostel',
            rent=Decimal('3000.00')
        )

    def test_create_booking_with_date_object(self):
        booking = create_booking(self.tenant, self.listing.id, date(2025, 6, 1))
        self.assertEqual(booking.status, 'pending')
        self.assertEqual(booking.move_in_date, date(2025, 6, 1))
        self.assertEqual(booking.listing_id, self.listing.id)

    def test_missing_listing_id_is_invalid_input(self):
        with self.assertRaises(InvalidInput):
            create_booking(self.tenant, None, '2025-01-01')

    def test_missing_date_is_invalid_input(self):
        with self.assertRaises(InvalidInput) as context:
            create_booking(self.tenant, self.listing.id, '')
        self.assertEqual(context.exception.code, 'invalid_input')

    def test_input_checked_before_listing_lookup(self):
        # Both the date and the listing are bad; the date is reported
        with self.assertRaises(InvalidInput):
            create_booking(self.tenant, 999999, 'not-a-date')

    def test_unknown_listing_is_not_found(self):
        with self.assertRaises(NotFound):
            create_booking(self.tenant, 999999, '2025-01-01')

    def test_owner_is_forbidden(self):
        with self.assertRaises(Forbidden):
            create_booking(self.owner, self.listing.id, '2025-01-01')
        self.assertFalse(Booking.objects.exists())

    def test_parse_move_in_date_rejects_impossible_dates(self):
        with self.assertRaises(InvalidInput):
            parse_move_in_date('2025-02-30')
