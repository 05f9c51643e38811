"""
Errors raised by the service layer.

Routes translate these into HTTPException; provider messages are passed
through to the caller unchanged.
"""


class IdentityProviderError(Exception):
    """Failure reported by the identity provider (bad credentials, taken email, ...)."""

    def __init__(self, code: str, message: str, status_code: int = 400):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code


class ImageHostingError(Exception):
    """Avatar upload to the image host failed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MailDeliveryError(Exception):
    """A transactional email could not be sent."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class JobNotFoundError(LookupError):
    pass


class ApplicantNotFoundError(LookupError):
    pass
