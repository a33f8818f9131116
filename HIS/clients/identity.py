"""
Client identifier assignment.

Identifiers look like ``HIS-2025-007``: prefix, the current year and a
sequence number zero-padded to three digits (wider numbers are kept whole).
Numbers come from a single ``IdentitySequence`` row that is locked and
incremented inside the caller's transaction, so two concurrent registrations
never draw the same number.
"""
import logging
from typing import Optional, Protocol

from django.conf import settings
from django.db import transaction
from django.db.models import F, Max
from django.utils import timezone

from .models import Client, IdentitySequence

logger = logging.getLogger(__name__)

CLIENT_SEQUENCE = 'client'


def generate_client_id(sequence_number: int, year: Optional[int] = None) -> str:
    if year is None:
        year = timezone.now().year
    prefix = getattr(settings, 'CLIENT_ID_PREFIX', 'HIS')
    return f"{prefix}-{year}-{sequence_number:03d}"


class IdGenerator(Protocol):
    def next_client_id(self) -> str:
        ...


class SequenceIdGenerator:
    """Draws client ids from the database-backed sequence."""

    def __init__(self, name: str = CLIENT_SEQUENCE):
        self.name = name

    def next_value(self) -> int:
        with transaction.atomic():
            sequence = IdentitySequence.objects.select_for_update().filter(name=self.name).first()
            if sequence is None:
                # First use: continue from the highest existing client row
                current_max = Client.objects.aggregate(max_id=Max('id'))['max_id'] or 0
                sequence, _ = IdentitySequence.objects.get_or_create(
                    name=self.name, defaults={'last_value': current_max}
                )
                sequence = IdentitySequence.objects.select_for_update().get(pk=sequence.pk)
            IdentitySequence.objects.filter(pk=sequence.pk).update(last_value=F('last_value') + 1)
            sequence.refresh_from_db(fields=['last_value'])
        logger.debug(f"Sequence {self.name} advanced to {sequence.last_value}")
        return sequence.last_value

    def next_client_id(self) -> str:
        return generate_client_id(self.next_value())
