import django_filters
from .models import CustomUser

class UserFilter(django_filters.FilterSet):
    """Filter staff users by role and name"""
    role = django_filters.ChoiceFilter(choices=CustomUser.ROLE_CHOICES)
    name = django_filters.CharFilter(lookup_expr='icontains')

    class Meta:
        model = CustomUser
        fields = ["role", "name"]
