import logging

from rest_framework.response import Response

from .participation.exceptions import QuizEngineError
from .users.models import get_user_role

logger = logging.getLogger(__name__)


class QuizEngineErrorMixin:
    """
    Basis-Mixin für alle Quiz-Views.

    Wandelt QuizEngineError-Exceptions in JSON-Antworten mit dem passenden
    HTTP-Status um und stellt die Rolle des anfragenden Users bereit.
    """

    def handle_exception(self, exc):
        if isinstance(exc, QuizEngineError):
            if exc.status_code >= 500:
                logger.error(f"{self.__class__.__name__}: {exc.error_code} - {exc.message}")
            else:
                logger.info(f"{self.__class__.__name__}: {exc.error_code} - {exc.message}")
            return Response(exc.to_dict(), status=exc.status_code)
        return super().handle_exception(exc)

    @property
    def viewer_role(self) -> str:
        return get_user_role(self.request.user)
