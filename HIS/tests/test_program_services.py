"""
Service-level tests for programs and the enrollment integrity rules.
"""
from unittest.mock import patch

import pytest

from HIS.exceptions import ConflictError, NotFoundError, Unauthorized, ValidationError
from clients.models import Visit
from programs import services
from programs.models import Enrollment, Program


def program_data(**overrides):
    data = {
        'name': 'Malaria',
        'code': 'malaria',
        'description': 'Prevention and treatment of malaria',
        'required_info': ['testResults', 'medication'],
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestCreateProgram:

    @pytest.mark.parametrize('raw_code', ['hiv', 'Hiv', 'HIV', '  hiv '])
    def test_code_stored_upper_case(self, auth, raw_code):
        program = services.create_program(program_data(code=raw_code), auth=auth)

        program.refresh_from_db()
        assert program.code == 'HIV'

    def test_duplicate_code_in_any_case_conflicts(self, auth):
        services.create_program(program_data(code='TB'), auth=auth)

        with pytest.raises(ConflictError) as excinfo:
            services.create_program(program_data(code='tb', name='Other'), auth=auth)

        assert 'already exists' in str(excinfo.value.detail)
        assert Program.objects.count() == 1

    def test_blank_code_rejected(self, auth):
        with pytest.raises(ValidationError):
            services.create_program(program_data(code='  '), auth=auth)

    def test_requires_authentication(self, anonymous):
        with pytest.raises(Unauthorized):
            services.create_program(program_data(), auth=anonymous)
        assert Program.objects.count() == 0

    def test_lookup_by_code_ignores_case(self, auth):
        program = services.create_program(program_data(), auth=auth)
        assert services.get_program_by_code('Malaria') == program


@pytest.mark.django_db
class TestUpdateProgram:

    def test_only_present_fields_change(self, auth, program):
        services.update_program(program.pk, {'description': 'Updated'}, auth=auth)

        program.refresh_from_db()
        assert program.description == 'Updated'
        assert program.name == 'Tuberculosis (TB)'
        assert program.code == 'TB'

    def test_new_code_is_normalized(self, auth, program):
        services.update_program(program.pk, {'code': 'tb-dots'}, auth=auth)
        program.refresh_from_db()
        assert program.code == 'TB-DOTS'

    def test_keeping_own_code_is_allowed(self, auth, program):
        services.update_program(program.pk, {'code': 'tb'}, auth=auth)
        program.refresh_from_db()
        assert program.code == 'TB'

    def test_code_taken_by_other_program_conflicts(self, auth, program, program_factory):
        other = program_factory(code='HIV')
        with pytest.raises(ConflictError):
            services.update_program(other.pk, {'code': 'tb'}, auth=auth)


@pytest.mark.django_db
class TestDeleteProgram:

    def test_blocked_while_enrolled(self, auth, program, registered_client):
        Enrollment.objects.create(client=registered_client, program=program)

        with pytest.raises(ConflictError):
            services.delete_program(program.pk, auth=auth)
        assert Program.objects.filter(pk=program.pk).exists()

    def test_blocked_by_visits(self, auth, program, registered_client):
        Visit.objects.create(client=registered_client, program=program, doctor='Dr. A', purpose='Review')

        with pytest.raises(ConflictError):
            services.delete_program(program.pk, auth=auth)

    def test_deletes_unused_program(self, auth, program):
        services.delete_program(program.pk, auth=auth)
        assert not Program.objects.filter(pk=program.pk).exists()

    def test_missing_program(self, auth):
        with pytest.raises(NotFoundError):
            services.delete_program(9999, auth=auth)


@pytest.mark.django_db
class TestEnrollment:

    def test_create_enrollment(self, auth, registered_client, program):
        enrollment = services.create_enrollment(
            {'client_id': registered_client.pk, 'program_id': program.pk,
             'symptom_severity': 'mild', 'risk_level': 'low'},
            auth=auth,
        )

        assert enrollment.status == 'active'
        assert enrollment.follow_up_required is False
        assert enrollment.enroll_date is not None

    def test_locks_client_row_while_enrolling(self, auth, registered_client, program):
        with patch.object(services, 'lock_client', wraps=services.lock_client) as lock:
            services.create_enrollment(
                {'client_id': registered_client.pk, 'program_id': program.pk}, auth=auth
            )

        lock.assert_called_once_with(registered_client.pk)

    def test_duplicate_enrollment_conflicts_and_keeps_original(self, auth, registered_client, program):
        original = services.create_enrollment(
            {'client_id': registered_client.pk, 'program_id': program.pk,
             'notes': 'first', 'risk_level': 'high'},
            auth=auth,
        )

        with pytest.raises(ConflictError) as excinfo:
            services.create_enrollment(
                {'client_id': registered_client.pk, 'program_id': program.pk,
                 'notes': 'second', 'risk_level': 'low'},
                auth=auth,
            )

        assert str(excinfo.value.detail) == 'Client already enrolled in program'
        assert Enrollment.objects.count() == 1
        original.refresh_from_db()
        assert original.notes == 'first'
        assert original.risk_level == 'high'

    def test_missing_client(self, auth, program):
        with pytest.raises(NotFoundError) as excinfo:
            services.create_enrollment({'client_id': 9999, 'program_id': program.pk}, auth=auth)
        assert str(excinfo.value.detail) == 'Client not found'

    def test_missing_program(self, auth, registered_client):
        with pytest.raises(NotFoundError) as excinfo:
            services.create_enrollment({'client_id': registered_client.pk, 'program_id': 9999}, auth=auth)
        assert str(excinfo.value.detail) == 'Program not found'

    def test_delete_enrollment_is_idempotent(self, auth, registered_client, program):
        Enrollment.objects.create(client=registered_client, program=program)

        assert services.delete_enrollment(registered_client.pk, program.pk, auth=auth) is True
        assert services.delete_enrollment(registered_client.pk, program.pk, auth=auth) is False

    def test_delete_missing_enrollment_returns_false(self, auth):
        assert services.delete_enrollment(9999, 9999, auth=auth) is False

    def test_delete_requires_authentication(self, anonymous, registered_client, program):
        Enrollment.objects.create(client=registered_client, program=program)

        with pytest.raises(Unauthorized):
            services.delete_enrollment(registered_client.pk, program.pk, auth=anonymous)
        assert Enrollment.objects.count() == 1

    def test_enrollments_by_client_embed_program(self, registered_client, program):
        Enrollment.objects.create(client=registered_client, program=program)

        enrollments = list(services.get_enrollments_by_client(registered_client.pk))
        assert [e.program.code for e in enrollments] == ['TB']

    def test_enrollments_by_program_embed_client(self, registered_client, program):
        Enrollment.objects.create(client=registered_client, program=program)

        enrollments = list(services.get_enrollments_by_program(program.pk))
        assert [e.client.name for e in enrollments] == ['John Doe']


@pytest.mark.django_db
class TestAggregates:

    def test_programs_without_enrollments_count_zero(self, program_factory, client_factory):
        busy = program_factory(code='TB')
        idle = program_factory(code='HIV')
        for _ in range(2):
            Enrollment.objects.create(client=client_factory(), program=busy)

        counts = {p.code: p.enrollment_count for p in services.get_programs_with_enrollment_count()}

        assert counts == {'TB': 2, 'HIV': 0}
        assert idle.code in counts

    def test_stats_count_everything(self, program_factory, client_factory):
        tb = program_factory(code='TB')
        program_factory(code='HIV')
        first = client_factory()
        client_factory()
        Enrollment.objects.create(client=first, program=tb, status='completed')

        assert services.get_stats() == {
            'totalClients': 2,
            'activePrograms': 2,
            'newEnrollments': 1,
        }
