from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ProgramViewSet, EnrollmentViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'programs', ProgramViewSet)
router.register(r'enrollments', EnrollmentViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
