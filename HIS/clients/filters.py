import django_filters
from .models import Client

class ClientFilter(django_filters.FilterSet):
    """Filter clients by status and gender"""
    status = django_filters.ChoiceFilter(choices=Client.STATUS_CHOICES)
    gender = django_filters.ChoiceFilter(choices=Client.GENDER_CHOICES)

    class Meta:
        model = Client
        fields = ["status", "gender"]
