"""Management command to complete confirmed rentals whose period has ended."""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from django_rentals.services import complete_elapsed_bookings


class Command(BaseCommand):
    help = 'Mark confirmed, undisputed bookings completed once their end date has passed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            help='Treat this ISO date as today (default: today)'
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List bookings that would be completed without changing them'
        )

    def handle(self, *args, **options):
        today = None
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date '{options['date']}', expected YYYY-MM-DD")

        bookings = complete_elapsed_bookings(today=today, dry_run=options['dry_run'])

        if options['dry_run']:
            self.stdout.write(f'Would complete {len(bookings)} bookings')
            for booking in bookings:
                self.stdout.write(f'  - {booking.pk} ({booking.equipment_id}, ends {booking.end_date})')
        else:
            self.stdout.write(
                self.style.SUCCESS(f'Completed {len(bookings)} bookings')
            )
