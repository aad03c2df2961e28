from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from apps.utils.exceptions import ValidationError
from apps.utils.utils import first_error
from .serializers import SellerApplicationSerializer
from .services import SellerService


class ApplySellerView(APIView):
    permission_classes = [AllowAny]
    # The seller form reads failures from `error`, not `message`
    error_key = "error"

    def post(self, request):
        serializer = SellerApplicationSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(first_error(serializer.errors, include_field=False))

        application = SellerService.submit(**serializer.validated_data)
        return Response({"success": True, "applicationId": application.id})
