# Complete Bookings Management Command
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from core.bookings import complete_booking
from core.exceptions import MarketplaceError
from core.models import Booking


class Command(BaseCommand):
    help = (
        'Marks accepted bookings whose move-in date has passed as completed, '
        'so tenants can review them.'
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Complete bookings with a move-in date on or before this date '
                 '(YYYY-MM-DD). Defaults to today.',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the bookings that would be completed without saving changes.',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        cutoff = self.parse_cutoff(options['date'])

        due = Booking.objects.filter(
            status='accepted',
            move_in_date__lte=cutoff,
        ).order_by('move_in_date', 'pk')

        completed = 0
        skipped = 0

        for booking_id, move_in_date in due.values_list('pk', 'move_in_date'):
            if dry_run:
                self.stdout.write(
                    f'  [DRY-RUN] Booking {booking_id} (move-in {move_in_date}) would be completed'
                )
                completed += 1
                continue

            try:
                complete_booking(booking_id)
            except MarketplaceError as e:
                # Changed state since the query ran
                self.stderr.write(f'  Skipped booking {booking_id}: {e.message}')
                skipped += 1
                continue
            completed += 1

        if dry_run:
            self.stdout.write(self.style.SUCCESS(
                f'Dry run completed. {completed} booking(s) due on or before {cutoff}.'
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f'Completed {completed} booking(s), skipped {skipped}.'
            ))

    def parse_cutoff(self, value):
        if not value:
            return timezone.localdate()

        try:
            cutoff = parse_date(value)
        except ValueError:
            cutoff = None
        if cutoff is None:
            raise CommandError(f'Invalid --date "{value}". Use YYYY-MM-DD.')
        return cutoff
