"""
Error types raised by desk services and rendered by the app error handler
"""


class DeskError(Exception):
    """Base error for all desk services"""

    status_code = 500

    def __init__(self, message, details=None, status_code=None):
        super().__init__(message)
        self.message = message
        self.details = list(details or [])
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        payload = {'error': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(DeskError):
    """Payload failed validation"""

    status_code = 400

    def __init__(self, message, details=None):
        if isinstance(message, (list, tuple)):
            details = list(message)
            message = details[0] if len(details) == 1 else 'Validation failed'
        super().__init__(message, details)


class NotFoundError(DeskError):
    """Requested record does not exist"""

    status_code = 404

    def __init__(self, kind, record_id):
        super().__init__(f'{kind} not found: {record_id}')
        self.kind = kind
        self.record_id = record_id


class ConflictError(DeskError):
    """Operation is not allowed in the record's current state"""

    status_code = 409
