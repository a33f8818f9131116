from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from HIS.access import OpenActionsMixin
from HIS.exceptions import parse_id
from clients.serializers import EnrollmentWithClientSerializer
from userManager.auth import AuthContext
from . import services
from .filters import EnrollmentFilter
from .models import Program, Enrollment
from .serializers import (
    EnrollmentSerializer,
    ProgramSerializer,
    ProgramUpdateSerializer,
    ProgramWithEnrollmentCountSerializer,
)

INVALID_PROGRAM_ID = "Invalid program ID"


class ProgramViewSet(OpenActionsMixin, viewsets.ModelViewSet):
    """Program catalogue. Only single-program reads are open."""
    queryset = Program.objects.all()
    serializer_class = ProgramSerializer
    open_actions = ('retrieve', 'enrollments')

    def get_queryset(self):
        return services.get_programs()

    def retrieve(self, request, pk=None):
        program = services.get_program(parse_id(pk, INVALID_PROGRAM_ID))
        return Response(ProgramSerializer(program).data)

    def create(self, request, *args, **kwargs):
        serializer = ProgramSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        program = services.create_program(
            serializer.validated_data, auth=AuthContext.from_request(request)
        )
        return Response(ProgramSerializer(program).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, *args, **kwargs):
        program_pk = parse_id(pk, INVALID_PROGRAM_ID)
        serializer = ProgramUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        program = services.update_program(
            program_pk, serializer.validated_data, auth=AuthContext.from_request(request)
        )
        return Response(ProgramSerializer(program).data)

    def partial_update(self, request, pk=None, *args, **kwargs):
        return self.update(request, pk, *args, **kwargs)

    def destroy(self, request, pk=None, *args, **kwargs):
        services.delete_program(parse_id(pk, INVALID_PROGRAM_ID), auth=AuthContext.from_request(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Every program with its number of enrollments."""
        programs = services.get_programs_with_enrollment_count()
        return Response(ProgramWithEnrollmentCountSerializer(programs, many=True).data)

    @action(detail=True, methods=['get'])
    def enrollments(self, request, pk=None):
        program = services.get_program(parse_id(pk, INVALID_PROGRAM_ID))
        enrollments = services.get_enrollments_by_program(program.pk)
        return Response(EnrollmentWithClientSerializer(enrollments, many=True).data)


class EnrollmentViewSet(OpenActionsMixin, viewsets.ModelViewSet):
    queryset = Enrollment.objects.all()
    serializer_class = EnrollmentSerializer
    filterset_class = EnrollmentFilter
    http_method_names = ['get', 'post', 'head', 'options']
    open_actions = ('list', 'retrieve')

    def get_queryset(self):
        return services.get_enrollments()

    def retrieve(self, request, pk=None):
        enrollment = services.get_enrollment(parse_id(pk, "Invalid enrollment ID"))
        return Response(EnrollmentSerializer(enrollment).data)

    def create(self, request, *args, **kwargs):
        serializer = EnrollmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        enrollment = services.create_enrollment(
            serializer.validated_data, auth=AuthContext.from_request(request)
        )
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)
