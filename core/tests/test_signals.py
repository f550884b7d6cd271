"""
Tests for Django signals that keep listing ratings derived from reviews.
"""

from datetime import date
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TransactionTestCase

from core.models import Booking, Listing, Review, RATING_CATEGORIES
from core.reviews import create_review

User = get_user_model()


class ReviewDeleteSignalTests(TransactionTestCase):
    """
    Test suite for the review post_delete signal.

    Uses TransactionTestCase so deletions run in real transactions.
    """

    def setUp(self):
        self.owner = User.objects.create_user(
            username='owner1',
            email='owner1@test.com',
            password='testpass123',
            user_type='owner'
        )
        self.listing = Listing.objects.create(
            owner=self.owner,
            title='Lake View Mess',
            address='12 Road 5, Dhanmondi',
            city='Dhaka',
            listing_type='mess',
            rent=Decimal('4500.00')
        )

        self.reviews = []
        for index, score in enumerate((5, 3)):
            tenant = User.objects.create_user(
                username=f'tenant{index}',
                email=f'tenant{index}@test.com',
                password='testpass123',
                user_type='tenant'
            )
            booking = Booking.objects.create(
                listing=self.listing,
                tenant=tenant,
                move_in_date=date(2025, 1, 1),
                status='completed'
            )
            ratings = {category: score for category in RATING_CATEGORIES}
            self.reviews.append(create_review(booking.id, tenant.id, ratings, 'Review text'))

    def test_reviews_build_up_aggregate(self):
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.total_ratings, 2)
        self.assertEqual(self.listing.average_rating, Decimal('4.0'))

    def test_deleting_review_recalculates_listing(self):
        self.reviews[1].delete()

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.total_ratings, 1)
        self.assertEqual(self.listing.average_rating, Decimal('5.0'))

    def test_deleting_last_review_resets_to_zero(self):
        Review.objects.filter(listing=self.listing).delete()

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.total_ratings, 0)
        self.assertEqual(self.listing.average_rating, Decimal('0.0'))

    def test_deleting_booking_cascades_and_recalculates(self):
        self.reviews[0].booking.delete()

        self.listing.refresh_from_db()
        self.assertEqual(self.listing.total_ratings, 1)
        self.assertEqual(self.listing.average_rating, Decimal('3.0'))

    def test_deleting_listing_cascades_cleanly(self):
        listing_id = self.listing.id
        self.listing.delete()

        self.assertFalse(Listing.objects.filter(pk=listing_id).exists())
        self.assertFalse(Review.objects.filter(listing_id=listing_id).exists())

    def test_failed_recalculation_rolls_back_deletion(self):
        review_id = self.reviews[0].id
        with mock.patch(
            'core.signals.recalculate_listing_rating',
            side_effect=RuntimeError('database hiccup')
        ):
            with self.assertRaises(RuntimeError):
                self.reviews[0].delete()

        self.assertTrue(Review.objects.filter(pk=review_id).exists())
