from django.urls import path
from . import views

app_name = 'rides'

urlpatterns = [
    # Public
    path('all/', views.get_all_rides, name='all-rides'),
    path('search/', views.search_rides, name='search-rides'),

    # Driver
    path('create/', views.create_ride, name='create-ride'),
    path('myrides/', views.get_my_rides, name='my-rides'),
    path('<int:ride_id>/status/', views.update_ride_status, name='update-ride-status'),
    path('<int:ride_id>/', views.delete_ride, name='delete-ride'),
]
