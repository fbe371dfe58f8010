"""Authentication backends for the API."""
import logging

from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

logger = logging.getLogger("visatrack")


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth reading the ``Authorization`` header, then an HttpOnly cookie.

    A bad header token is rejected with 401.  A stale or invalid cookie
    token leaves the request anonymous instead, so ``AllowAny`` endpoints
    such as token refresh keep working.  Cookie-authenticated requests
    must pass the CSRF check.
    """

    def authenticate(self, request: Request):
        header = self.get_header(request)
        raw_token = self.get_raw_token(header) if header is not None else None
        if raw_token is not None:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token

        return self._authenticate_cookie(request)

    def _authenticate_cookie(self, request: Request):
        raw_token = request.COOKIES.get(getattr(settings, "JWT_AUTH_COOKIE", "access_token"))
        if not raw_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            logger.debug("Ignoring stale access cookie for %s", request.path)
            return None

        self._enforce_csrf(request)
        return self.get_user(validated_token), validated_token

    @staticmethod
    def _enforce_csrf(request: Request) -> None:
        django_request = request._request
        check = CsrfViewMiddleware(lambda req: None)
        check.process_request(django_request)
        reason = check.process_view(django_request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
