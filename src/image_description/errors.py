"""
Exception hierarchy for image description

Every stage raises one of these; callers catch ImageDescriptionError to
handle any failure of the pipeline.
"""

from typing import Optional


class ImageDescriptionError(Exception):
    """Base exception for image description failures"""
    pass


class FetchError(ImageDescriptionError):
    """Image source unreachable or returned a non-success status"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyDataError(ImageDescriptionError):
    """Image resolved to zero bytes"""
    pass


class ConversionError(ImageDescriptionError):
    """Image format conversion failed"""
    pass


class ProviderInitError(ImageDescriptionError):
    """Vision provider could not be selected or initialized"""
    pass


class ProviderCallError(ImageDescriptionError):
    """Remote vision API call failed or returned a malformed response"""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
