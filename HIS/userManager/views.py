import logging

from django.contrib.auth import login
from rest_framework import filters, generics, status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from .filters import UserFilter
from .models import CustomUser
from .serializers import CustomRegisterSerializer, UserSerializer

logger = logging.getLogger(__name__)


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """Staff directory. Users are immutable once registered."""
    queryset = CustomUser.objects.all().order_by("-created_at")
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = UserFilter
    search_fields = ["username", "name", "email"]


class CustomRegisterView(generics.CreateAPIView):
    """Register a staff account and start a session for it."""
    serializer_class = CustomRegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        login(request._request, user, backend='django.contrib.auth.backends.ModelBackend')
        logger.info(f"Registered user {user.pk} ({user.username})")
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
