from django.urls import path
from .views import ApplySellerView

urlpatterns = [
    path('apply-seller', ApplySellerView.as_view(), name='apply-seller'),
]
