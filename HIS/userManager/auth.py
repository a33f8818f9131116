"""
Authentication capability handed to the registry services.

Views build an ``AuthContext`` from the request; services call
``auth.require()`` before any mutation so they can be exercised without
HTTP or middleware state.
"""
from dataclasses import dataclass
from typing import Optional

from HIS.exceptions import Unauthorized


@dataclass(frozen=True)
class AuthContext:
    user: Optional[object] = None

    @classmethod
    def from_request(cls, request):
        return cls(user=getattr(request, 'user', None))

    @classmethod
    def anonymous(cls):
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user is not None and self.user.is_authenticated)

    @property
    def display_name(self) -> str:
        if not self.is_authenticated:
            return ''
        return self.user.get_full_name()

    def require(self):
        """Raise ``Unauthorized`` unless a logged-in user is attached."""
        if not self.is_authenticated:
            raise Unauthorized()
        return self.user
