"""
Client registry operations.

Every mutation takes an ``AuthContext`` and refuses to run without an
authenticated user. Uniqueness problems are reported as ``ConflictError``
instead of leaking database errors.
"""
import logging
from typing import Any, Dict, Optional

from django.db import IntegrityError, transaction
from django.db.models import Prefetch, Q

from HIS.exceptions import ConflictError, NotFoundError, ValidationError
from programs.models import Enrollment, Program
from userManager.auth import AuthContext
from .identity import IdGenerator, SequenceIdGenerator
from .models import Client, Note, Visit

logger = logging.getLogger(__name__)

MAX_ID_DRAWS = 50


def get_clients():
    return Client.objects.all()


def get_client(pk) -> Client:
    try:
        return Client.objects.get(pk=pk)
    except Client.DoesNotExist:
        raise NotFoundError("Client not found")


def lock_client(pk) -> Client:
    """Fetch a client and hold its row lock until the surrounding transaction ends."""
    try:
        return Client.objects.select_for_update().get(pk=pk)
    except Client.DoesNotExist:
        raise NotFoundError("Client not found")


def get_client_by_client_id(client_id: str) -> Optional[Client]:
    return Client.objects.filter(client_id=client_id).first()


def _client_id_conflict(client_id):
    logger.warning(f"Rejected duplicate client id {client_id}")
    return ConflictError(f"Client ID {client_id} already exists")


def draw_client_id(generator: IdGenerator) -> str:
    """
    Draw the next unused id from ``generator``.

    Each draw is committed on its own, so numbers already taken by manually
    supplied ids are skipped rather than handed out again.
    """
    candidate = None
    for _ in range(MAX_ID_DRAWS):
        candidate = generator.next_client_id()
        if not Client.objects.filter(client_id=candidate).exists():
            return candidate
        logger.warning(f"Skipping client id {candidate}, already in use")
    raise _client_id_conflict(candidate)


def create_client(data: Dict[str, Any], *, auth: AuthContext,
                  id_generator: Optional[IdGenerator] = None) -> Client:
    """
    Register a client.

    When ``client_id`` is missing or blank one is drawn from ``id_generator``
    before the insert. A supplied id that is already taken raises
    ``ConflictError``; the existing row is never overwritten.
    """
    auth.require()
    data = dict(data)
    client_id = (data.pop('client_id', None) or '').strip()
    if not client_id:
        client_id = draw_client_id(id_generator or SequenceIdGenerator())

    try:
        with transaction.atomic():
            if Client.objects.filter(client_id=client_id).exists():
                raise _client_id_conflict(client_id)
            client = Client.objects.create(client_id=client_id, **data)
    except IntegrityError:
        raise _client_id_conflict(client_id)

    logger.info(f"Client {client.pk} registered as {client.client_id}")
    return client


def update_client(pk, changes: Dict[str, Any], *, auth: AuthContext) -> Client:
    """Apply only the fields present in ``changes``."""
    auth.require()
    client = get_client(pk)
    changes = dict(changes)

    if 'client_id' in changes:
        new_client_id = (changes['client_id'] or '').strip()
        if not new_client_id:
            raise ValidationError("Client ID may not be blank")
        if Client.objects.filter(client_id=new_client_id).exclude(pk=client.pk).exists():
            raise _client_id_conflict(new_client_id)
        changes['client_id'] = new_client_id

    if not changes:
        return client

    for field, value in changes.items():
        setattr(client, field, value)
    try:
        with transaction.atomic():
            client.save(update_fields=list(changes))
    except IntegrityError:
        raise _client_id_conflict(client.client_id)

    logger.info(f"Client {client.pk} updated: {', '.join(sorted(changes))}")
    return client


def delete_client(pk, *, auth: AuthContext):
    """
    Remove a client together with its visits, notes and inactive enrollments.
    Refused while any active enrollment still references the client.
    """
    auth.require()
    with transaction.atomic():
        client = lock_client(pk)
        active = client.enrollments.filter(status='active').count()
        if active:
            logger.warning(f"Refused to delete client {client.pk} with {active} active enrollment(s)")
            raise ConflictError(
                f"Client has {active} active enrollment(s); unenroll them before deleting"
            )
        client.delete()
    logger.info(f"Client {pk} deleted")


def search_clients(query: Optional[str]):
    """Case-insensitive match on name, client id or phone. Blank queries match nothing."""
    query = (query or '').strip()
    if not query:
        return Client.objects.none()
    return Client.objects.filter(
        Q(name__icontains=query) |
        Q(client_id__icontains=query) |
        Q(phone__icontains=query)
    )


def get_client_details(pk) -> Client:
    """
    Client with enrollments and visits (each with its program) and notes
    (with their program when one is set).
    """
    queryset = Client.objects.prefetch_related(
        Prefetch('enrollments', queryset=Enrollment.objects.select_related('program')),
        Prefetch('visits', queryset=Visit.objects.select_related('program')),
        Prefetch('notes', queryset=Note.objects.select_related('program')),
    )
    try:
        return queryset.get(pk=pk)
    except Client.DoesNotExist:
        raise NotFoundError("Client not found")


def _require_program(program_pk):
    if not Program.objects.filter(pk=program_pk).exists():
        raise NotFoundError("Program not found")


def get_visits_by_client(pk):
    client = get_client(pk)
    return Visit.objects.filter(client=client).select_related('program')


def create_visit(data: Dict[str, Any], *, auth: AuthContext) -> Visit:
    auth.require()
    get_client(data['client_id'])
    _require_program(data['program_id'])
    visit = Visit.objects.create(**data)
    logger.info(f"Visit {visit.pk} recorded for client {visit.client_id}")
    return visit


def get_notes_by_client(pk):
    client = get_client(pk)
    return Note.objects.filter(client=client).select_related('program')


def create_note(data: Dict[str, Any], *, auth: AuthContext) -> Note:
    auth.require()
    data = dict(data)
    get_client(data['client_id'])
    if data.get('program_id') is not None:
        _require_program(data['program_id'])
    if not data.get('created_by'):
        data['created_by'] = auth.display_name
    note = Note.objects.create(**data)
    logger.info(f"Note {note.pk} added for client {note.client_id}")
    return note
