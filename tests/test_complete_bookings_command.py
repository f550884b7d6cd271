from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from core.models import User, Listing, Booking


class CompleteBookingsCommandTests(TestCase):
    def setUp(self):
        self.owner = User.objects.create_user(
            username='owner1', email='o1@test.com', password='password', user_type='owner'
        )
        self.tenant = User.objects.create_user(
            username='tenant1', email='t1@test.com', password='password', user_type='tenant'
        )
        self.listing = Listing.objects.create(
            owner=self.owner, title='Listing 1', address='Addr 1', city='Dhaka',
            listing_type='mess', rent=Decimal('4000.00')
        )

        today = timezone.localdate()
        self.past_accepted = self._booking(today - timedelta(days=3), 'accepted')
        self.today_accepted = self._booking(today, 'accepted')
        self.future_accepted = self._booking(today + timedelta(days=10), 'accepted')
        self.past_pending = self._booking(today - timedelta(days=3), 'pending')

    def _booking(self, move_in_date, status):
        return Booking.objects.create(
            listing=self.listing, tenant=self.tenant,
            move_in_date=move_in_date, status=status
        )

    def _statuses(self):
        for booking in (self.past_accepted, self.today_accepted,
                        self.future_accepted, self.past_pending):
            booking.refresh_from_db()
        return (
            self.past_accepted.status,
            self.today_accepted.status,
            self.future_accepted.status,
            self.past_pending.status,
        )

    def test_completes_accepted_bookings_due_today(self):
        out = StringIO()
        call_command('complete_bookings', stdout=out)

        self.assertEqual(
            self._statuses(),
            ('completed', 'completed', 'accepted', 'pending')
        )
        self.assertIn('Completed 2 booking(s), skipped 0.', out.getvalue())

    def test_explicit_date(self):
        cutoff = (timezone.localdate() - timedelta(days=1)).isoformat()
        call_command('complete_bookings', '--date', cutoff, stdout=StringIO())

        self.assertEqual(
            self._statuses(),
            ('completed', 'accepted', 'accepted', 'pending')
        )

    def test_dry_run_saves_nothing(self):
        out = StringIO()
        call_command('complete_bookings', '--dry-run', stdout=out)

        self.assertEqual(
            self._statuses(),
            ('accepted', 'accepted', 'accepted', 'pending')
        )
        self.assertIn('[DRY-RUN] Booking', out.getvalue())

    def test_invalid_date_raises_command_error(self):
        with self.assertRaises(CommandError):
            call_command('complete_bookings', '--date', '2025-13-01', stdout=StringIO())

    def test_far_past_cutoff_completes_nothing(self):
        call_command('complete_bookings', '--date', date(2000, 1, 1).isoformat(), stdout=StringIO())

        self.assertEqual(
            self._statuses(),
            ('accepted', 'accepted', 'accepted', 'pending')
        )
