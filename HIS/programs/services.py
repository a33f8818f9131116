"""
Program and enrollment operations, plus the dashboard aggregates.

A client is enrolled in a given program at most once. The unique constraint
on (client, program) is the final guard: a duplicate insert is caught and
turned into ``ConflictError`` so callers get a clear reason.
"""
import logging
from typing import Any, Dict, Optional

from django.db import IntegrityError, transaction
from django.db.models import Count, ProtectedError

from HIS.exceptions import ConflictError, NotFoundError, ValidationError
from clients.models import Client
from clients.services import get_client, lock_client
from userManager.auth import AuthContext
from .models import Enrollment, Program

logger = logging.getLogger(__name__)

DUPLICATE_CODE_MESSAGE = "Program code already exists"
DUPLICATE_ENROLLMENT_MESSAGE = "Client already enrolled in program"


def normalize_code(code: Optional[str]) -> str:
    return (code or '').strip().upper()


# Programs

def get_programs():
    return Program.objects.all()


def get_program(pk) -> Program:
    try:
        return Program.objects.get(pk=pk)
    except Program.DoesNotExist:
        raise NotFoundError("Program not found")


def get_program_by_code(code: str) -> Optional[Program]:
    return Program.objects.filter(code=normalize_code(code)).first()


def create_program(data: Dict[str, Any], *, auth: AuthContext) -> Program:
    auth.require()
    data = dict(data)
    code = normalize_code(data.pop('code', None))
    if not code:
        raise ValidationError("Program code is required")
    if get_program_by_code(code) is not None:
        logger.warning(f"Rejected duplicate program code {code}")
        raise ConflictError(DUPLICATE_CODE_MESSAGE)

    try:
        with transaction.atomic():
            program = Program.objects.create(code=code, **data)
    except IntegrityError:
        logger.warning(f"Program code {code} taken by a concurrent insert")
        raise ConflictError(DUPLICATE_CODE_MESSAGE)

    logger.info(f"Program {program.pk} created with code {program.code}")
    return program


def update_program(pk, changes: Dict[str, Any], *, auth: AuthContext) -> Program:
    """Apply only the fields present in ``changes``; a new code is re-normalized."""
    auth.require()
    program = get_program(pk)
    changes = dict(changes)

    if 'code' in changes:
        code = normalize_code(changes['code'])
        if not code:
            raise ValidationError("Program code is required")
        if Program.objects.filter(code=code).exclude(pk=program.pk).exists():
            raise ConflictError(DUPLICATE_CODE_MESSAGE)
        changes['code'] = code

    if not changes:
        return program

    for field, value in changes.items():
        setattr(program, field, value)
    try:
        with transaction.atomic():
            program.save(update_fields=list(changes))
    except IntegrityError:
        raise ConflictError(DUPLICATE_CODE_MESSAGE)

    logger.info(f"Program {program.pk} updated: {', '.join(sorted(changes))}")
    return program


def delete_program(pk, *, auth: AuthContext):
    """Refused while any enrollment or visit still references the program."""
    auth.require()
    with transaction.atomic():
        program = get_program(pk)
        enrollment_count = program.enrollments.count()
        if enrollment_count:
            logger.warning(f"Refused to delete program {program.pk} with {enrollment_count} enrollment(s)")
            raise ConflictError(
                f"Program has {enrollment_count} enrollment(s) and cannot be deleted"
            )
        if program.visits.exists():
            raise ConflictError("Program has recorded visits and cannot be deleted")
        try:
            program.delete()
        except ProtectedError:
            raise ConflictError("Program is still referenced and cannot be deleted")
    logger.info(f"Program {pk} deleted")


# Enrollments

def get_enrollments():
    return Enrollment.objects.all()


def get_enrollment(pk) -> Enrollment:
    try:
        return Enrollment.objects.get(pk=pk)
    except Enrollment.DoesNotExist:
        raise NotFoundError("Enrollment not found")


def get_enrollments_by_client(client_pk):
    """Enrollments of one client, each carrying its program."""
    return Enrollment.objects.filter(client_id=client_pk).select_related('program')


def get_enrollments_by_program(program_pk):
    """Enrollments in one program, each carrying its client."""
    return Enrollment.objects.filter(program_id=program_pk).select_related('client')


def create_enrollment(data: Dict[str, Any], *, auth: AuthContext) -> Enrollment:
    """
    Enroll a client in a program.

    Both parents must exist (``NotFoundError``). A second enrollment for the
    same pair raises ``ConflictError`` and leaves the first one untouched.
    """
    auth.require()
    data = dict(data)
    client = get_client(data.pop('client_id'))
    program = get_program(data.pop('program_id'))

    try:
        with transaction.atomic():
            # Client row lock orders this insert against delete_client
            client = lock_client(client.pk)
            enrollment = Enrollment.objects.create(client=client, program=program, **data)
    except IntegrityError:
        logger.warning(f"Client {client.pk} already enrolled in program {program.pk}")
        raise ConflictError(DUPLICATE_ENROLLMENT_MESSAGE)

    logger.info(f"Client {client.pk} enrolled in program {program.pk} (enrollment {enrollment.pk})")
    return enrollment


def delete_enrollment(client_pk, program_pk, *, auth: AuthContext) -> bool:
    """Hard-delete the enrollment of a pair. Returns False when there was none."""
    auth.require()
    deleted, _ = Enrollment.objects.filter(client_id=client_pk, program_id=program_pk).delete()
    if deleted:
        logger.info(f"Client {client_pk} unenrolled from program {program_pk}")
    return deleted > 0


# Aggregates

def get_programs_with_enrollment_count():
    """Every program, including those nobody is enrolled in (count 0)."""
    return Program.objects.annotate(enrollment_count=Count('enrollments')).order_by('id')


def get_stats() -> Dict[str, int]:
    """
    Dashboard counters.

    ``activePrograms`` counts every program and ``newEnrollments`` every
    enrollment; neither is filtered by status or time window.
    """
    return {
        'totalClients': Client.objects.count(),
        'activePrograms': Program.objects.count(),
        'newEnrollments': Enrollment.objects.count(),
    }
