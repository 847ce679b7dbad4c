"""Custom exception classes for the initial-load demo server."""


class InitLoadError(Exception):
    """Base exception for initload."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class RandomSourceError(InitLoadError):
    """The cryptographic random source could not produce bytes.

    This is an environment failure: the process cannot synthesize trace
    identifiers and must stop rather than serve a malformed header.
    """

    def __init__(self, message: str = "Cryptographic random source unavailable", details=None):
        super().__init__("RANDOM_SOURCE_UNAVAILABLE", message, details, status_code=500)


class TemplateRenderError(InitLoadError):
    """Page template could not be loaded or rendered."""

    def __init__(self, template: str, reason: str):
        super().__init__(
            "TEMPLATE_RENDER_ERROR",
            f"Failed to render template '{template}'",
            details={"template": template, "reason": reason},
            status_code=500,
        )


class ConfigurationError(InitLoadError):
    """Invalid startup configuration."""

    def __init__(self, message: str, details=None):
        super().__init__("CONFIGURATION_ERROR", message, details, status_code=500)
