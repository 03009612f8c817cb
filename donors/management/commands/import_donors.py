# donors/management/commands/import_donors.py
"""
Django management command to import donor data from CSV or Excel
Usage: python manage.py import_donors path/to/donors.xlsx
"""

from pathlib import Path

import pandas as pd
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from algorithms.exceptions import InvalidBloodGroup
from algorithms.records import BloodGroup
from donors.models import DonorProfile

User = get_user_model()


def read_table(path):
    if Path(path).suffix.lower() == '.csv':
        return pd.read_csv(path, dtype={'phone': str})
    return pd.read_excel(path, dtype={'phone': str})


def optional(value):
    """pandas marks empty cells as NaN"""
    return value if pd.notna(value) else None


def parse_bool(value, default):
    value = optional(value)
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'y')
    return bool(value)


class Command(BaseCommand):
    help = 'Import donors from a CSV or Excel file'

    def add_arguments(self, parser):
        parser.add_argument('path', type=str, help='Path to the .csv / .xlsx file')
        parser.add_argument('--default-password', default='ChangeMe123!',
                            help='Password for newly created donor accounts')

    def handle(self, *args, **options):
        path = options['path']

        self.stdout.write(self.style.WARNING(f'Starting import from {path}...'))

        try:
            df = read_table(path)
        except FileNotFoundError:
            raise CommandError(f'File not found: {path}')

        self.stdout.write(f'Found {len(df)} rows')

        # Rows without a name or email cannot become accounts
        df = df.dropna(subset=['full_name', 'email'])

        imported_count = 0
        updated_count = 0
        skipped_count = 0

        with transaction.atomic():
            for index, row in df.iterrows():
                line = index + 2  # header is line 1

                try:
                    blood_group = BloodGroup.parse(row.get('blood_group'))
                except InvalidBloodGroup as e:
                    self.stdout.write(self.style.WARNING(f'Skipping row {line}: {e}'))
                    skipped_count += 1
                    continue

                rating = optional(row.get('rating')) or 0
                try:
                    rating = int(rating)
                except (TypeError, ValueError):
                    rating = -1
                if not 0 <= rating <= 50:
                    self.stdout.write(self.style.WARNING(f'Skipping row {line}: Rating must be 0-50'))
                    skipped_count += 1
                    continue

                last_donation = optional(row.get('last_donation_date'))
                if last_donation is not None:
                    try:
                        last_donation = pd.to_datetime(last_donation).date()
                    except (TypeError, ValueError) as e:
                        self.stdout.write(self.style.WARNING(f'Invalid date at row {line}: {e}'))
                        last_donation = None

                email = str(row['email']).strip().lower()
                username = email.split('@')[0].replace(' ', '_')[:30]
                user, user_created = User.objects.get_or_create(
                    email=email,
                    defaults={'username': username, 'is_active': True},
                )
                if user_created:
                    user.set_password(options['default_password'])
                    user.save()

                latitude = optional(row.get('latitude'))
                longitude = optional(row.get('longitude'))
                donor_count = optional(row.get('donation_count'))

                donor, created = DonorProfile.objects.update_or_create(
                    user=user,
                    defaults={
                        'full_name': str(row['full_name']).strip(),
                        'phone': str(optional(row.get('phone')) or ''),
                        'blood_group': blood_group.value,
                        'district': str(optional(row.get('district')) or ''),
                        'upazila': str(optional(row.get('upazila')) or ''),
                        'latitude': float(latitude) if latitude is not None else None,
                        'longitude': float(longitude) if longitude is not None else None,
                        'rating': rating,
                        'is_verified': parse_bool(row.get('is_verified'), False),
                        'is_available': parse_bool(row.get('is_available'), True),
                        'last_donation_date': last_donation,
                        'donation_count': int(donor_count) if donor_count is not None else 0,
                    }
                )

                if created:
                    imported_count += 1
                    self.stdout.write(f'Created: {donor.donor_code} {donor.full_name} ({donor.blood_group})')
                else:
                    updated_count += 1
                    self.stdout.write(f'Updated: {donor.donor_code} {donor.full_name} ({donor.blood_group})')

        self.stdout.write(
            self.style.SUCCESS(
                f'\nImport complete!\n'
                f'Created: {imported_count}\n'
                f'Updated: {updated_count}\n'
                f'Skipped: {skipped_count}\n'
                f'Total: {imported_count + updated_count}'
            )
        )
