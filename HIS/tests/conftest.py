"""
Global test fixtures for pytest.

Provides reusable fixtures for registry testing:
- Anonymous and authenticated API clients
- Staff user and its AuthContext for service-level tests
- Program and client factories
"""
import datetime

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from clients.models import Client
from programs.models import Program
from userManager.auth import AuthContext

User = get_user_model()


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def auth_client(staff_user):
    """API client authenticated as a staff user."""
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


# ============================================================================
# Users and auth
# ============================================================================

@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        username='nurse.joy',
        password='s3cure-pass-123',
        name='Nurse Joy',
        email='nurse.joy@test.com',
    )


@pytest.fixture
def auth(staff_user):
    """AuthContext for an authenticated staff user."""
    return AuthContext(user=staff_user)


@pytest.fixture
def anonymous():
    return AuthContext.anonymous()


# ============================================================================
# Factory-style Fixtures
# ============================================================================

@pytest.fixture
def program_factory(db):
    """
    Usage:
        tb = program_factory(code='TB')
    """
    created = []

    def _create_program(**kwargs):
        defaults = {
            'name': f'Program {len(created) + 1}',
            'code': f'PRG{len(created) + 1}',
            'description': 'Test health program',
            'required_info': ['testResults', 'followup'],
        }
        defaults.update(kwargs)
        program = Program.objects.create(**defaults)
        created.append(program)
        return program

    return _create_program


@pytest.fixture
def client_factory(db):
    """
    Usage:
        john = client_factory(name='John Doe')
    """
    created = []

    def _create_client(**kwargs):
        defaults = {
            'client_id': f'HIS-2020-{len(created) + 1:03d}',
            'name': f'Test Client {len(created) + 1}',
            'dob': datetime.date(1990, 1, 15),
            'gender': 'female',
            'phone': f'07000000{len(created):02d}',
            'address': '12 Moi Avenue, Nairobi',
            'emergency_contact': 'Next of kin 0722000000',
        }
        defaults.update(kwargs)
        client = Client.objects.create(**defaults)
        created.append(client)
        return client

    return _create_client


@pytest.fixture
def program(program_factory):
    return program_factory(name='Tuberculosis (TB)', code='TB')


@pytest.fixture
def registered_client(client_factory):
    return client_factory(name='John Doe', phone='0712345678')


@pytest.fixture
def client_payload():
    return {
        'name': 'Mary Wanjiku',
        'dob': '1988-06-30',
        'gender': 'female',
        'phone': '0711222333',
        'address': 'Kisumu',
        'email': 'mary@example.com',
        'emergencyContact': 'Peter 0799888777',
    }
