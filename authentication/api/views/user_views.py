from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import PrivateUserSerializer, PublicUserSerializer, UserUpdateSerializer
from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import AccountDeletionResponseSerializer, ErrorResponseSerializer


class UserListView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="users_list",
        summary="List users",
        parameters=[
            OpenApiParameter(name="search", type=str, description="Match on username or name"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="limit", type=int, description="Items per page (default: 10)"),
        ],
        responses={200: OpenApiResponse(description="Paginated public profiles")},
        tags=["Users"],
    )
    def get(self, request):
        try:
            page = int(request.query_params.get("page", 1))
            limit = int(request.query_params.get("limit", 10))
        except ValueError:
            return Response(
                {"error": "validation_error", "detail": "page and limit must be integers"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = container.account_service().list_users(request.query_params.get("search"), page, limit)
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = PublicUserSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)


class UserDetailView(APIView):
    """
    GET: public profile. PUT/PATCH: self-service update. DELETE: account cascade.
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    @extend_schema(
        operation_id="users_retrieve",
        summary="Get public profile",
        responses={
            200: OpenApiResponse(response=PublicUserSerializer, description="Profile"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Users"],
    )
    def get(self, request, user_id):
        result = container.account_service().get_user(user_id)
        if not result.ok:
            return error_response(result)
        return Response(PublicUserSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="users_update",
        summary="Update own profile",
        description="""
        **What it receives:**
        - Any of `username`, `name`, `email`
        - `password` together with `current_password` to change the password

        **What it returns:**
        - The updated profile (including email)
        """,
        request=UserUpdateSerializer,
        responses={
            200: OpenApiResponse(response=PrivateUserSerializer, description="Profile updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your account"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email or username taken"),
        },
        tags=["Users"],
    )
    def put(self, request, user_id):
        serializer = UserUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "validation_error", "detail": "Invalid profile data", "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = container.account_service().update_user(user_id, request.user, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(PrivateUserSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(operation_id="users_partial_update", request=UserUpdateSerializer, tags=["Users"])
    def patch(self, request, user_id):
        return self.put(request, user_id)

    @extend_schema(
        operation_id="users_destroy",
        summary="Delete own account",
        description="""
        Deletes every product the account sells (with their orders and images),
        every order the account placed, and finally the account itself.
        Image store failures are reported in the summary but do not block deletion.
        """,
        responses={
            200: OpenApiResponse(response=AccountDeletionResponseSerializer, description="Account deleted"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your account"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Users"],
    )
    def delete(self, request, user_id):
        result = container.cascade_service().delete_account(user_id, request.user)
        if not result.ok:
            return error_response(result)
        return Response(result.value.to_dict(), status=status.HTTP_200_OK)
