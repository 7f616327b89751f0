import logging

from django.contrib import messages

from .auth import SessionExpired
from .decorators import login_redirect

logger = logging.getLogger(__name__)


class SessionExpiredMiddleware:
    """Turn an unrecoverable 401 from the API into a trip back to the login page."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, SessionExpired):
            return None
        logger.info('Session expired for %s', request.path)
        messages.warning(request, 'Your session has expired. Please sign in again.')
        return login_redirect(request)
