"""
Tests for registration, login and the staff directory.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework import status

from programs.models import Program

User = get_user_model()


@pytest.mark.django_db
class TestRegister:
    endpoint = '/api/register'

    def test_register_returns_user_without_password(self, api_client):
        payload = {
            'username': 'dr.otieno',
            'password': 'Kliniki-2025!',
            'name': 'Dr. Otieno',
            'email': 'otieno@example.com',
        }

        response = api_client.post(self.endpoint, payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert 'password' not in response.data
        assert response.data['username'] == 'dr.otieno'
        assert response.data['role'] == 'user'
        user = User.objects.get(username='dr.otieno')
        assert user.check_password('Kliniki-2025!')

    def test_duplicate_username(self, api_client, staff_user):
        payload = {
            'username': staff_user.username,
            'password': 'Kliniki-2025!',
            'name': 'Copy',
            'email': 'copy@example.com',
        }

        response = api_client.post(self.endpoint, payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'username' in response.json()['message']


@pytest.mark.django_db
class TestLogin:

    def test_login_issues_tokens(self, api_client, staff_user):
        response = api_client.post(
            '/api/login', {'username': 'nurse.joy', 'password': 's3cure-pass-123'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data
        assert response.data['user']['name'] == 'Nurse Joy'

    def test_bearer_token_unlocks_mutations(self, api_client, staff_user):
        login = api_client.post(
            '/api/login', {'username': 'nurse.joy', 'password': 's3cure-pass-123'}, format='json'
        )
        api_client.logout()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")

        response = api_client.post(
            '/api/programs', {'name': 'Malaria', 'code': 'mal', 'description': 'x'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_wrong_password(self, api_client, staff_user):
        response = api_client.post(
            '/api/login', {'username': 'nurse.joy', 'password': 'nope'}, format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.json()) == {'message'}

    def test_current_user_requires_login(self, api_client):
        response = api_client.get('/api/user')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'message' in response.json()

    def test_current_user(self, auth_client):
        response = auth_client.get('/api/user')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['username'] == 'nurse.joy'


@pytest.mark.django_db
class TestUserDirectory:
    endpoint = '/api/users'

    def test_list_users(self, auth_client):
        response = auth_client.get(self.endpoint)

        assert response.status_code == status.HTTP_200_OK
        assert [u['username'] for u in response.data] == ['nurse.joy']

    def test_search_users(self, auth_client):
        User.objects.create_user(username='dr.kim', password='x', name='Dr. Kim', email='kim@example.com')

        response = auth_client.get(self.endpoint, {'search': 'kim'})

        assert [u['username'] for u in response.data] == ['dr.kim']

    def test_requires_login(self, api_client):
        assert api_client.get(self.endpoint).status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestSeedRegistry:

    def test_seeds_admin_and_programs_once(self):
        call_command('seed_registry')
        call_command('seed_registry')

        admin = User.objects.get(username='admin')
        assert admin.is_superuser
        assert admin.role == 'admin'
        assert admin.check_password('admin123')
        assert sorted(Program.objects.values_list('code', flat=True)) == ['HIV', 'MALARIA', 'MATERNAL', 'TB']
