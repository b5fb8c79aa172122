"""
Error types raised by the services and their JSON rendering.

Every error is reported to the client as {'success': False, 'error': message}
with the error's HTTP status.
"""

from flask import jsonify, current_app


class MeetupError(Exception):
    """Base class for errors reported to API clients."""
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationRequired(MeetupError):
    status_code = 401
    default_message = 'Not logged in'


class ValidationError(MeetupError):
    """A required identifier or parameter is missing or malformed."""
    status_code = 400
    default_message = 'Invalid request'


class NotFoundError(MeetupError):
    status_code = 404
    default_message = 'Not found'


class OperationFailedError(MeetupError):
    """A multi-step change failed and was rolled back."""
    status_code = 500
    default_message = 'Operation failed'


def register_error_handlers(app):
    """Render MeetupError subclasses as JSON responses."""

    @app.errorhandler(MeetupError)
    def handle_meetup_error(error):
        if error.status_code >= 500:
            current_app.logger.error(f"{type(error).__name__}: {error.message}")
        return jsonify({'success': False, 'error': error.message}), error.status_code
