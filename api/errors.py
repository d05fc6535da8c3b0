import logging

from rest_framework import status
from rest_framework.response import Response

from backend.ledger.repos import (
    ConstraintViolation,
    NotFoundError,
    RepoError,
    TransientStorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConstraintViolation, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (TransientStorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(exc: RepoError, action: str) -> Response:
    """Render a repository/service error as {'error': message} with its status code."""
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            break
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if code >= 500:
        logger.error("Error %s: %s", action, exc)
    else:
        logger.warning("Rejected %s: %s", action, exc)
    return Response({'error': str(exc)}, status=code)


def server_error_response(action: str) -> Response:
    logger.exception("Unexpected error %s", action)
    return Response({'error': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
