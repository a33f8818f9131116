from django.urls import path, include
from dj_rest_auth.views import LoginView, LogoutView, UserDetailsView
from rest_framework.routers import SimpleRouter
from rest_framework_simplejwt.views import TokenRefreshView

from .serializers import CustomTokenRefreshSerializer
from .views import CustomRegisterView, UserViewSet

router = SimpleRouter(trailing_slash=False)
router.register(r'users', UserViewSet)

urlpatterns = [
    path('register', CustomRegisterView.as_view(), name='register'),
    path('login', LoginView.as_view(), name='login'),
    path('logout', LogoutView.as_view(), name='logout'),
    path('user', UserDetailsView.as_view(), name='current-user'),
    path('token/refresh', TokenRefreshView.as_view(serializer_class=CustomTokenRefreshSerializer), name='token-refresh'),
    path('', include(router.urls)),
]
