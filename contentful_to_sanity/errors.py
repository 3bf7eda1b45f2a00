"""Custom exceptions for the Contentful to Sanity migration."""

from typing import Optional


class ContentfulToSanityError(Exception):
    """Base exception for migration errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(ContentfulToSanityError):
    """Exception raised for an invalid export configuration."""

    def __init__(self, message: str = "Invalid export configuration", details: Optional[str] = None):
        super().__init__(message, details)


class MappingError(ContentfulToSanityError):
    """Exception raised when a Contentful field cannot be mapped to Sanity."""

    def __init__(
        self,
        field_id: str,
        reason: str,
        content_type_id: Optional[str] = None,
    ):
        self.field_id = field_id
        self.reason = reason
        self.content_type_id = content_type_id
        if content_type_id:
            message = f"Cannot map field '{field_id}' of content type '{content_type_id}'"
        else:
            message = f"Cannot map field '{field_id}'"
        super().__init__(message, reason)


class ExportDirectoryError(ContentfulToSanityError):
    """Exception raised when an export directory cannot be created."""

    def __init__(self, path: str, details: Optional[str] = None):
        self.path = path
        super().__init__(f"Cannot create directory '{path}'", details)


class ExportError(ContentfulToSanityError):
    """Exception raised for Contentful API failures during an export."""

    def __init__(
        self,
        message: str = "Contentful export failed",
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, details)

    def __str__(self):
        parts = [self.message]
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)
