# chatauth/services/_shared/base.py
from __future__ import annotations

from http import HTTPStatus

from chatauth.core import errors as api_errors
from chatauth.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    ServiceError,
    StoreUnavailableError,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Centralize the translation of service errors into API errors.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services depend on ports only; transactions live inside the adapters.
    - Services hold no mutable shared state, so one instance may serve
      unbounded concurrent callers.
    """

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, ConflictError):
            # → 409 Conflict; the message never names the colliding attribute
            return api_errors.Conflict(str(exc))

        if isinstance(exc, AuthenticationError):
            # → 401 Unauthorized with a stable, per-cause code
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, StoreUnavailableError):
            # → 503; infrastructure, never masked as an auth failure
            return api_errors.APIError(
                message="Service temporarily unavailable",
                status_code=HTTPStatus.SERVICE_UNAVAILABLE,
                code="service_unavailable",
                details={"store": exc.store},
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=400,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
