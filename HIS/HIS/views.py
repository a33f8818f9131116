from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from programs.services import get_stats


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    return Response({'status': 'ok'})


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def stats(request):
    """Dashboard counters: totalClients, activePrograms, newEnrollments."""
    return Response(get_stats())
