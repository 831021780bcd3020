import logging

from rest_framework.response import Response

from ...exceptions import ExamSessionException

logger = logging.getLogger(__name__)


def exam_error_response(request, exc: ExamSessionException) -> Response:
    """Abgelehnte Operation mit Fehlercode und passendem HTTP-Status."""
    logger.info(
        f"Abgelehnt ({exc.error_code}) für Benutzer {getattr(request.user, 'id', None)} "
        f"auf {request.path}: {exc.message}"
    )
    return Response(exc.to_dict(), status=exc.status_code)
