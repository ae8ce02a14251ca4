from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.pricing.api.v1.views import DollarRateViewSet

router = DefaultRouter()
router.register(r'dollar', DollarRateViewSet, basename='dollar-rate')

urlpatterns = [
    path('', include(router.urls)),
]
