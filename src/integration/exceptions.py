class IntegrationException(Exception):
    """Base exception for integration layer errors."""
    pass


# IP Office Specific Exceptions

class IpoException(IntegrationException):
    """Base exception for IP Office management API errors."""
    pass


class IpoAuthenticationException(IpoException):
    """Raised when the appliance refuses to open a usable session."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        content_type: str | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.content_type = content_type
        self.body = body


class IpoRequestException(IpoException):
    """Raised when a resource call against the appliance fails."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class IpoProtectedIdentityException(IpoRequestException):
    """Raised when a delete targets the protected NoUser account."""
    pass
