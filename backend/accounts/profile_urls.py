from django.urls import path

from .views import ProfileView, ProfileUpdateView

app_name = 'profile'

urlpatterns = [
    path('profile/', ProfileView.as_view(), name='profile'),
    path('update/', ProfileUpdateView.as_view(), name='update'),
]
