"""
Domain errors raised by services and translated to HTTP responses.
"""
from http import HTTPStatus


class GymApiError(Exception):
    """
    Base error carrying an HTTP status code and a client-facing message.

    Attributes:
        code (int): HTTP status code used when the error reaches the API boundary
        message (str): Human readable description
    """
    code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "Unexpected error"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)

    def to_dict(self):
        """Render the error with the response envelope shape."""
        body = {'success': False, 'message': self.message}
        if self.errors:
            body['errors'] = self.errors
        return body


class ValidationError(GymApiError):
    """Malformed or missing input, bad date ordering."""
    code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid input"


class AuthorizationError(GymApiError):
    """Caller role or ownership does not permit the operation."""
    code = HTTPStatus.FORBIDDEN
    default_message = "Access denied"


class NotFoundError(GymApiError):
    """Unknown member, membership, subscription or assignment id."""
    code = HTTPStatus.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(GymApiError):
    """Duplicate current subscription, delete of a referenced membership."""
    code = HTTPStatus.CONFLICT
    default_message = "Conflict with existing data"
