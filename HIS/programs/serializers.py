from rest_framework import serializers
from rest_framework.fields import ISO_8601
from .models import Program, Enrollment


class ProgramSerializer(serializers.ModelSerializer):
    requiredInfo = serializers.ListField(
        source='required_info',
        child=serializers.ChoiceField(choices=Program.REQUIRED_INFO_CHOICES),
        required=False,
    )

    class Meta:
        model = Program
        fields = ['id', 'name', 'code', 'description', 'requiredInfo']
        read_only_fields = ['id']
        # Uniqueness of code is checked by the registry so it can answer 409
        extra_kwargs = {'code': {'validators': []}}

    def validate_code(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("This field may not be blank.")
        return value

    def validate_requiredInfo(self, value):
        return list(dict.fromkeys(value))


class ProgramUpdateSerializer(ProgramSerializer):
    """Patch payload: only the fields present in the request are changed."""

    def __init__(self, *args, **kwargs):
        kwargs['partial'] = True
        super().__init__(*args, **kwargs)


class ProgramWithEnrollmentCountSerializer(ProgramSerializer):
    enrollmentCount = serializers.IntegerField(source='enrollment_count', read_only=True)

    class Meta(ProgramSerializer.Meta):
        fields = ProgramSerializer.Meta.fields + ['enrollmentCount']


class EnrollmentSerializer(serializers.ModelSerializer):
    clientId = serializers.IntegerField(source='client_id')
    programId = serializers.IntegerField(source='program_id')
    enrollDate = serializers.DateTimeField(
        source='enroll_date', required=False, input_formats=[ISO_8601, '%Y-%m-%d']
    )
    symptomSeverity = serializers.ChoiceField(
        source='symptom_severity', choices=Enrollment.SEVERITY_CHOICES, required=False, allow_null=True
    )
    riskLevel = serializers.ChoiceField(
        source='risk_level', choices=Enrollment.RISK_CHOICES, required=False, allow_null=True
    )
    followUpRequired = serializers.BooleanField(source='follow_up_required', required=False)

    class Meta:
        model = Enrollment
        fields = [
            'id', 'clientId', 'programId', 'enrollDate', 'notes', 'status',
            'symptomSeverity', 'riskLevel', 'followUpRequired',
        ]
        read_only_fields = ['id']
        # (client, program) uniqueness is enforced by the registry, not here
        validators = []


class EnrollmentWithProgramSerializer(EnrollmentSerializer):
    program = ProgramSerializer(read_only=True)

    class Meta(EnrollmentSerializer.Meta):
        fields = EnrollmentSerializer.Meta.fields + ['program']
