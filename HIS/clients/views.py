from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from HIS.access import OpenActionsMixin
from HIS.exceptions import NotFoundError, ValidationError, parse_id
from programs import services as program_services
from programs.serializers import EnrollmentWithProgramSerializer
from userManager.auth import AuthContext
from . import services
from .filters import ClientFilter
from .models import Client, Note, Visit
from .serializers import (
    ClientDetailsSerializer,
    ClientSerializer,
    ClientUpdateSerializer,
    NoteSerializer,
    NoteWithProgramSerializer,
    VisitSerializer,
    VisitWithProgramSerializer,
)

INVALID_CLIENT_ID = "Invalid client ID"


class ClientViewSet(OpenActionsMixin, viewsets.ModelViewSet):
    """
    Client registry. Reads are open; every mutation requires an
    authenticated user.
    """
    queryset = Client.objects.all()
    serializer_class = ClientSerializer
    filterset_class = ClientFilter
    open_actions = ('list', 'retrieve', 'details', 'enrollments', 'visits', 'notes')

    def get_queryset(self):
        """A present ``search`` parameter switches to search, even when blank."""
        if 'search' in self.request.query_params:
            return services.search_clients(self.request.query_params.get('search'))
        return services.get_clients()

    def retrieve(self, request, pk=None):
        client = services.get_client(parse_id(pk, INVALID_CLIENT_ID))
        return Response(ClientSerializer(client).data)

    def create(self, request, *args, **kwargs):
        serializer = ClientSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = services.create_client(
            serializer.validated_data, auth=AuthContext.from_request(request)
        )
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, *args, **kwargs):
        client_pk = parse_id(pk, INVALID_CLIENT_ID)
        serializer = ClientUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = services.update_client(
            client_pk, serializer.validated_data, auth=AuthContext.from_request(request)
        )
        return Response(ClientSerializer(client).data)

    def partial_update(self, request, pk=None, *args, **kwargs):
        return self.update(request, pk, *args, **kwargs)

    def destroy(self, request, pk=None, *args, **kwargs):
        services.delete_client(parse_id(pk, INVALID_CLIENT_ID), auth=AuthContext.from_request(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def details(self, request, pk=None):
        """Client with enrollments, visits and notes."""
        client = services.get_client_details(parse_id(pk, INVALID_CLIENT_ID))
        return Response(ClientDetailsSerializer(client).data)

    @action(detail=True, methods=['get'])
    def enrollments(self, request, pk=None):
        client = services.get_client(parse_id(pk, INVALID_CLIENT_ID))
        enrollments = program_services.get_enrollments_by_client(client.pk)
        return Response(EnrollmentWithProgramSerializer(enrollments, many=True).data)

    @action(detail=True, methods=['get'])
    def visits(self, request, pk=None):
        visits = services.get_visits_by_client(parse_id(pk, INVALID_CLIENT_ID))
        return Response(VisitWithProgramSerializer(visits, many=True).data)

    @action(detail=True, methods=['get'])
    def notes(self, request, pk=None):
        notes = services.get_notes_by_client(parse_id(pk, INVALID_CLIENT_ID))
        return Response(NoteWithProgramSerializer(notes, many=True).data)

    @action(detail=True, methods=['delete'], url_path=r'programs/(?P<program_id>[^/.]+)')
    def unenroll(self, request, pk=None, program_id=None):
        try:
            client_pk, program_pk = int(pk), int(program_id)
        except (TypeError, ValueError):
            raise ValidationError("Invalid client ID or program ID")

        removed = program_services.delete_enrollment(
            client_pk, program_pk, auth=AuthContext.from_request(request)
        )
        if not removed:
            raise NotFoundError("Enrollment not found")
        return Response(status=status.HTTP_204_NO_CONTENT)


class VisitViewSet(mixins.CreateModelMixin, viewsets.GenericViewSet):
    queryset = Visit.objects.all()
    serializer_class = VisitSerializer
    permission_classes = [IsAuthenticated]

    def create(self, request, *args, **kwargs):
        serializer = VisitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        visit = services.create_visit(serializer.validated_data, auth=AuthContext.from_request(request))
        return Response(VisitSerializer(visit).data, status=status.HTTP_201_CREATED)


class NoteViewSet(mixins.CreateModelMixin, viewsets.GenericViewSet):
    queryset = Note.objects.all()
    serializer_class = NoteSerializer
    permission_classes = [IsAuthenticated]

    def create(self, request, *args, **kwargs):
        serializer = NoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        note = services.create_note(serializer.validated_data, auth=AuthContext.from_request(request))
        return Response(NoteSerializer(note).data, status=status.HTTP_201_CREATED)
