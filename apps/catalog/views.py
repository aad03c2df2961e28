from rest_framework import generics
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .serializers import ProductSerializer
from .services import ProductService


class ProductListView(generics.ListAPIView):
    """
    Public product list. Always the full catalog as a bare JSON array.
    """
    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def list(self, request, *args, **kwargs):
        products = ProductService.list_products()
        return Response(self.get_serializer(products, many=True).data)
