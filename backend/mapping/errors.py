"""
Error envelope for the API.

Every error body carries a human readable "message"; validation failures add
"errors" with the per-field details. Unexpected failures are turned into 500s
by the views themselves so they can attach the underlying error string.
"""
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler


class BadRequest(APIException):
    """Malformed or missing request parameters. Never retried."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {"message": "Invalid request data", "errors": response.data}
    else:
        detail = response.data.get("detail", exc) if isinstance(response.data, dict) else exc
        response.data = {"message": str(detail)}
    return response
