from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    ImageUploadRequestSerializer,
    ImageUploadResponseSerializer,
)


class ImageUploadView(APIView):
    """
    Client-initiated image upload, done before creating a product.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        operation_id="images_upload",
        summary="Upload product image",
        description="""
        **What it receives:**
        - `image` file (multipart, image/* up to 5MB)
        - Authentication token

        **What it returns:**
        - `url` to put in a product's `image_urls`, and the store's `public_id`
        """,
        request=ImageUploadRequestSerializer,
        responses={
            200: OpenApiResponse(response=ImageUploadResponseSerializer, description="Image uploaded"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Missing or invalid file"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Image store failure"),
        },
        tags=["Marketplace - Products"],
    )
    def post(self, request):
        result = container.catalog_service().upload_image(request.FILES.get("image"), request.user)
        if not result.ok:
            return error_response(result)

        stored = result.value
        return Response({"url": stored.url, "public_id": stored.public_id}, status=status.HTTP_200_OK)
