from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny

from apps.utils.exceptions import ValidationError
from apps.utils.throttle import AuthRateThrottle
from apps.utils.utils import first_error
from .serializers import CredentialsSerializer
from .services import AccountService


class CredentialsView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthRateThrottle]  # Strict IP-based throttling

    def get_credentials(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            raise ValidationError(first_error(serializer.errors))
        return serializer.validated_data["email"], serializer.validated_data["password"]


class RegisterView(CredentialsView):

    def post(self, request):
        email, password = self.get_credentials(request)
        AccountService.register(email=email, password=password)
        return Response({"success": True, "message": "Registered successfully"})


class LoginView(CredentialsView):

    def post(self, request):
        email, password = self.get_credentials(request)
        AccountService.authenticate(email=email, password=password)
        return Response({"success": True, "message": "Logged in successfully"})
