from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import ClientViewSet, VisitViewSet, NoteViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'clients', ClientViewSet)
router.register(r'visits', VisitViewSet)
router.register(r'notes', NoteViewSet)

urlpatterns = [
    path('', include(router.urls)),
]
