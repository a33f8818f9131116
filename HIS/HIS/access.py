"""
Per-action access for viewsets that mix open reads with protected writes.
"""
import logging

from rest_framework import exceptions
from rest_framework.permissions import AllowAny, IsAuthenticated

logger = logging.getLogger(__name__)


class OpenActionsMixin:
    """
    Actions listed in ``open_actions`` are served to anyone. A stale or
    malformed token on those actions is dropped and the caller is treated
    as anonymous; every other action requires an authenticated user.
    """
    open_actions = ()

    def get_permissions(self):
        if self.action in self.open_actions:
            return [AllowAny()]
        return [IsAuthenticated()]

    def perform_authentication(self, request):
        if self.action not in self.open_actions:
            return super().perform_authentication(request)
        try:
            request.user
        except exceptions.AuthenticationFailed as exc:
            # DRF has already reset the request to the anonymous user
            logger.debug(f"Ignoring credentials on open action {self.action}: {exc}")
