from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView

from authentication.api.serializers import CustomTokenObtainPairSerializer, PrivateUserSerializer, SignupSerializer
from authentication.infra.observability.metrics import login_total
from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer


class SignupAPIView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @extend_schema(
        operation_id="auth_signup",
        summary="Create an account",
        description="""
        **What it receives:**
        - `username` (3-20 chars), `name` (up to 50), `email`, `password` (6+ chars)

        **What it returns:**
        - The created account (without password)
        - 409 when the email or username is already in use
        """,
        request=SignupSerializer,
        responses={
            201: OpenApiResponse(
                response=PrivateUserSerializer,
                description="Account created",
                examples=[
                    OpenApiExample(
                        "Created",
                        value={
                            "id": "123e4567-e89b-12d3-a456-426614174000",
                            "username": "lampseller",
                            "name": "Lamp Seller",
                            "email": "seller@example.com",
                            "date_joined": "2024-05-01T10:00:00Z",
                        },
                    )
                ],
            ),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email or username taken"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "validation_error", "detail": "Invalid signup data", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = container.account_service().register(**serializer.validated_data)
        if not result.ok:
            return error_response(result)

        return Response(PrivateUserSerializer(result.value).data, status=status.HTTP_201_CREATED)


class LoginAPIView(TokenObtainPairView):
    """Email + password login returning an access/refresh JWT pair."""

    serializer_class = CustomTokenObtainPairSerializer

    @extend_schema(operation_id="auth_token_obtain", summary="Login with email and password", tags=["Authentication"])
    def post(self, request, *args, **kwargs):
        try:
            response = super().post(request, *args, **kwargs)
        except APIException:
            login_total.labels(status="failed").inc()
            raise
        login_total.labels(status="success").inc()
        return response
