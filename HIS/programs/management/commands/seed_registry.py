"""
Management command to seed the default admin account and starter programs.
"""
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from programs.models import Program

STARTER_PROGRAMS = [
    ('Tuberculosis (TB)', 'TB', 'Prevention and treatment of tuberculosis',
     ['testResults', 'medication', 'symptoms', 'followup']),
    ('Malaria', 'MALARIA', 'Prevention and treatment of malaria',
     ['testResults', 'medication', 'symptoms']),
    ('HIV/AIDS', 'HIV', 'HIV treatment and management program',
     ['testResults', 'medication', 'followup']),
    ('Maternal Health', 'MATERNAL', 'Prenatal and postnatal care',
     ['testResults', 'followup']),
]


class Command(BaseCommand):
    help = 'Create the default admin user and starter health programs if missing'

    @transaction.atomic
    def handle(self, *args, **options):
        User = get_user_model()

        username = os.environ.get('HIS_ADMIN_USERNAME', 'admin')
        password = os.environ.get('HIS_ADMIN_PASSWORD', 'admin123')

        if not User.objects.filter(username=username).exists():
            User.objects.create_superuser(
                username=username,
                password=password,
                name='Administrator',
                email='admin@example.com',
                role='admin',
            )
            self.stdout.write(self.style.SUCCESS(f'Admin user "{username}" created'))
        else:
            self.stdout.write(self.style.WARNING(f'Admin user "{username}" already exists'))

        for name, code, description, required_info in STARTER_PROGRAMS:
            _, created = Program.objects.get_or_create(
                code=code,
                defaults={'name': name, 'description': description, 'required_info': required_info},
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'Program {code} created'))
        self.stdout.write(self.style.SUCCESS('Registry seed complete'))
