"""
Error taxonomy shared by every chat operation.

The HTTP layer maps each kind to a status code through ``status_code``.
"""


class ParleyError(Exception):
    """Base exception for chat operation failures"""

    kind = "error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(ParleyError):
    """Token is unknown or its session has ended"""

    kind = "unauthenticated"
    status_code = 403


class NotFound(ParleyError):
    """Channel, DM, message or user id does not exist"""

    kind = "not_found"
    status_code = 400


class Forbidden(ParleyError):
    """Requester is not a member or lacks owner permission"""

    kind = "forbidden"
    status_code = 403


class InvalidInput(ParleyError):
    """Length, range or format violation"""

    kind = "invalid_input"
    status_code = 400
