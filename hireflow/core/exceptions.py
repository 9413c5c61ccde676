"""
Custom Exception Hierarchy

Raised by services, mapped to HTTP responses in hireflow.main:
- NotFoundException        -> 404
- InvalidRequestException  -> 400
- DispatchFailureException -> 500
- StorageFailureException  -> 500
- ExternalServiceException -> 502
"""


class HireFlowException(Exception):
    """Base exception for all service errors"""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundException(HireFlowException):
    """Requested resource not found"""

    status_code = 404

    def __init__(self, resource_type: str, identifier: str):
        self.resource_type = resource_type
        self.identifier = identifier
        super().__init__(f"{resource_type} not found: {identifier}")


class InvalidRequestException(HireFlowException):
    """Missing or malformed request data"""

    status_code = 400


class DispatchFailureException(HireFlowException):
    """Notification channel rejected the send"""

    def __init__(self, channel: str, reason: str):
        self.channel = channel
        self.reason = reason
        super().__init__(f"Notification dispatch via {channel} failed: {reason}")


class StorageFailureException(HireFlowException):
    """Persistence write rejected"""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Storage operation '{operation}' failed: {reason}")


class ExternalServiceException(HireFlowException):
    """An upstream API (AI model) failed or returned unusable output"""

    status_code = 502

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} request failed: {reason}")
