import django_filters
from .models import Enrollment

class EnrollmentFilter(django_filters.FilterSet):
    """Filter enrollments by client, program, status and risk level"""
    client = django_filters.NumberFilter(field_name='client_id')
    program = django_filters.NumberFilter(field_name='program_id')
    status = django_filters.ChoiceFilter(choices=Enrollment.STATUS_CHOICES)
    riskLevel = django_filters.ChoiceFilter(field_name='risk_level', choices=Enrollment.RISK_CHOICES)

    class Meta:
        model = Enrollment
        fields = ["client", "program", "status", "riskLevel"]
