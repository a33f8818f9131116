from rest_framework import serializers
from programs.serializers import EnrollmentSerializer, EnrollmentWithProgramSerializer, ProgramSerializer
from .models import Client, Visit, Note


class ClientSerializer(serializers.ModelSerializer):
    """
    Client create payload and representation.
    clientId is optional on input; the registry generates one when absent.
    """
    clientId = serializers.CharField(source='client_id', required=False, allow_blank=True, max_length=32)
    emergencyContact = serializers.CharField(source='emergency_contact', max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Client
        fields = [
            'id', 'clientId', 'name', 'dob', 'gender', 'phone', 'address',
            'email', 'emergencyContact', 'status', 'createdAt',
        ]
        read_only_fields = ['id']

    def validate_email(self, value):
        return value or None


class ClientUpdateSerializer(ClientSerializer):
    """Patch payload: only the fields present in the request are changed."""
    clientId = serializers.CharField(source='client_id', required=False, max_length=32)

    def __init__(self, *args, **kwargs):
        kwargs['partial'] = True
        super().__init__(*args, **kwargs)


class VisitSerializer(serializers.ModelSerializer):
    clientId = serializers.IntegerField(source='client_id')
    programId = serializers.IntegerField(source='program_id')
    date = serializers.DateTimeField(required=False)

    class Meta:
        model = Visit
        fields = ['id', 'clientId', 'programId', 'date', 'doctor', 'purpose']
        read_only_fields = ['id']


class VisitWithProgramSerializer(VisitSerializer):
    program = ProgramSerializer(read_only=True)

    class Meta(VisitSerializer.Meta):
        fields = VisitSerializer.Meta.fields + ['program']


class NoteSerializer(serializers.ModelSerializer):
    clientId = serializers.IntegerField(source='client_id')
    programId = serializers.IntegerField(source='program_id', required=False, allow_null=True)
    createdBy = serializers.CharField(source='created_by', required=False, max_length=255)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Note
        fields = ['id', 'clientId', 'programId', 'content', 'createdBy', 'createdAt']
        read_only_fields = ['id']


class NoteWithProgramSerializer(NoteSerializer):
    program = ProgramSerializer(read_only=True, allow_null=True)

    class Meta(NoteSerializer.Meta):
        fields = NoteSerializer.Meta.fields + ['program']


class ClientDetailsSerializer(ClientSerializer):
    enrollments = EnrollmentWithProgramSerializer(many=True, read_only=True)
    visits = VisitWithProgramSerializer(many=True, read_only=True)
    notes = NoteWithProgramSerializer(many=True, read_only=True)

    class Meta(ClientSerializer.Meta):
        fields = ClientSerializer.Meta.fields + ['enrollments', 'visits', 'notes']


class EnrollmentWithClientSerializer(EnrollmentSerializer):
    client = ClientSerializer(read_only=True)

    class Meta(EnrollmentSerializer.Meta):
        fields = EnrollmentSerializer.Meta.fields + ['client']
