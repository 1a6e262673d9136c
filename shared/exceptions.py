class CoachingError(Exception):
    """Base class for every failure the core reports to its callers."""

    kind = "internal_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(CoachingError):
    kind = "validation_error"
    status_code = 400


class NotFound(CoachingError):
    kind = "not_found"
    status_code = 404

    def __init__(self, name: str, entity_id=None):
        self.name = name
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{name} not found."
        else:
            message = f"{name} {entity_id} not found."
        super().__init__(message)


class Conflict(CoachingError):
    kind = "conflict"
    status_code = 409


class InternalError(CoachingError):
    kind = "internal_error"
    status_code = 500
