import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from algorithms.exceptions import MatchingError

logger = logging.getLogger(__name__)


def pulsecare_exception_handler(exc, context):
    """
    DRF exception handler that reports matching-engine errors as 400s.
    Everything else goes to DRF's default handler.
    """
    if isinstance(exc, MatchingError):
        view = context.get('view')
        logger.info(f"Rejected match input in {type(view).__name__}: {exc}")
        return Response({'detail': str(exc), 'code': exc.code}, status=status.HTTP_400_BAD_REQUEST)
    return exception_handler(exc, context)
