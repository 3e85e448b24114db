"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    error_code = "domain_error"

    def __init__(self, message: str, application_id: str | None = None, current_status: str | None = None):
        super().__init__(message)
        self.message = message
        self.application_id = application_id
        self.current_status = current_status


class ApplicationNotFoundError(DomainException):
    """No application is stored under the given id"""

    error_code = "not_found"

    def __init__(self, application_id: str):
        super().__init__("Application not found", application_id=application_id)


class InvalidStateError(DomainException):
    """Stage invoked out of order or re-invoked after it completed"""

    error_code = "invalid_state"


class AlreadyActivatedError(DomainException):
    """Card activation requested for an application whose card is already active"""

    error_code = "already_activated"

    def __init__(self, application_id: str, masked_card_number: str, current_status: str | None = None):
        super().__init__(
            "Card has already been activated",
            application_id=application_id,
            current_status=current_status,
        )
        self.masked_card_number = masked_card_number


class InvalidApplicationError(DomainException):
    """Intake data or stage input failed validation"""

    error_code = "invalid_request"


class ConcurrentModificationError(DomainException):
    """Stored record changed between load and write"""

    error_code = "concurrent_modification"
