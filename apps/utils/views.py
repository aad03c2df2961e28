# apps/utils/views.py
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.conf import settings


class ServerInfoView(APIView):
    """Name, version and the storefront-facing endpoints, for smoke checks."""
    permission_classes = [AllowAny]

    ENDPOINTS = {
        "products": "GET /api/products",
        "orders": "POST /api/orders",
        "register": "POST /api/register",
        "login": "POST /api/login",
        "apply_seller": "POST /api/apply-seller",
    }

    def get(self, request):
        return Response({
            "app_name": settings.PROJECT_NAME,
            "version": settings.PROJECT_VERSION,
            "debug": settings.DEBUG,
            "endpoints": self.ENDPOINTS,
        })
