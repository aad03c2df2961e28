from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from apps.utils.exceptions import ValidationError
from apps.utils.utils import first_error
from .serializers import OrderCreateSerializer
from .services import OrderService


class CreateOrderView(APIView):
    """
    Checkout endpoint.
    Expects: { "items": [{"id": 1, ...}, ...], "total": 2200, "payment": "cash" }
    """
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(first_error(serializer.errors))

        data = serializer.validated_data
        order = OrderService.place_order(
            items=data["items"],
            total=data["total"],
            payment_method=data["payment"],
        )
        return Response({"success": True, "orderId": order.id})
