"""
Authentication Views

JWT login, refresh and logout for the exam backend. Tokens are stored in
HTTP-only cookies instead of being returned in the response body; the
``backend.custom_auth.JWTAuthentication`` class reads them back.

Views:
- CookieTokenObtainPairView: Login, sets access/refresh cookies
- CookieTokenRefreshView: Rotates the tokens from the refresh cookie
- LogoutView: Blacklists the refresh token and clears the cookies

Author: Exam Platform Development Team
Version: 1.0.0
"""

import logging

from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

logger = logging.getLogger(__name__)


def set_token_cookies(response: Response, access=None, refresh=None) -> Response:
    """
    Writes the tokens as HTTP-only cookies.
     * httponly=True → no JavaScript access
     * secure → HTTPS only, controlled by JWT_COOKIE_SECURE
    """
    cookie_options = {
        "httponly": True,
        "secure": settings.JWT_COOKIE_SECURE,
        "samesite": settings.JWT_COOKIE_SAMESITE,
        "path": "/",
    }
    if refresh:
        response.set_cookie(
            "refresh_token",
            refresh,
            max_age=settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"],
            **cookie_options,
        )
    if access:
        response.set_cookie(
            "access_token",
            access,
            max_age=settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"],
            **cookie_options,
        )
    return response


class CookieTokenObtainPairView(TokenObtainPairView):
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        if response.status_code == 200:
            data = response.data
            refresh = data.pop("refresh", None)
            access = data.pop("access", None)
            set_token_cookies(response, access=access, refresh=refresh)
            response.data = {"detail": "Login erfolgreich."}
        return response


class CookieTokenRefreshView(APIView):
    """Accepts the refresh token from the cookie or, as fallback, the body."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get("refresh_token") or request.data.get("refresh")
        if not refresh_token:
            return Response(
                {"detail": "Refresh token not provided"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = TokenRefreshSerializer(data={"refresh": refresh_token})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        data = serializer.validated_data
        response = Response({"detail": "Token erneuert."}, status=status.HTTP_200_OK)
        return set_token_cookies(response, access=data.get("access"), refresh=data.get("refresh"))


class LogoutView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        refresh_token = request.COOKIES.get("refresh_token")
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                logger.info(f"Logout mit ungültigem Refresh Token: {e}")
        response = Response({"detail": "Successfully logged out."}, status=status.HTTP_205_RESET_CONTENT)
        response.delete_cookie("refresh_token")
        response.delete_cookie("access_token")
        return response
