class URLShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:url_shortener_error'


class InvalidInputError(URLShortenerError):
    """Base exception for rejected caller input. No state was mutated."""

    error_code = 'input:invalid_input_error'


class InvalidURLError(InvalidInputError):
    """Raised when a target URL fails validation."""

    error_code = 'input:invalid_url_error'


class InvalidShortcodeError(InvalidInputError):
    """Raised when a shortcode does not match the generation policy."""

    error_code = 'input:invalid_shortcode_error'


class InvalidTTLError(InvalidInputError):
    """Raised when a requested TTL is not a positive number of seconds."""

    error_code = 'input:invalid_ttl_error'


class AllocationExhaustedError(URLShortenerError):
    """Raised when no unique shortcode could be secured within the attempt bound.

    The caller may resubmit the request.
    """

    error_code = 'engine:allocation_exhausted_error'

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class ConfigurationError(URLShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InfrastructureError(URLShortenerError):
    """Base exception for all infrastructure (AWS) errors."""

    error_code = 'infra:infrastructure_error'


class AppConfigError(InfrastructureError):
    """Raised when AppConfig responds with erroneous data."""

    error_code = 'infra:appconfig_error'
