"""
Error types for the Business Central client

Precondition errors are raised before any network call and name the setup
step that is missing. Upstream failures keep the status code and body as
returned by Business Central.
"""

from typing import Optional


class BCClientError(Exception):
    """Base class for all client errors"""
    pass


class PreconditionError(BCClientError):
    """A required setup step has not been performed"""
    pass


class AuthenticationRequiredError(PreconditionError):
    """No access token in the session"""

    def __init__(self, message: str = "Not authenticated. Call authenticate() before issuing requests.") -> None:
        super().__init__(message)


class ConfigurationError(PreconditionError):
    """Context or route parameters required by the addressing mode are missing"""
    pass


class EnvironmentContextRequiredError(ConfigurationError):
    """No environment selected"""

    def __init__(self, message: str = "No environment selected. Call set_environment() first.") -> None:
        super().__init__(message)


class CompanyContextRequiredError(ConfigurationError):
    """No company selected"""

    def __init__(self, message: str = "No company selected. Call set_company() first.") -> None:
        super().__init__(message)


class CompanyNotFoundError(BCClientError):
    """The company lookup did not match any company in the environment"""
    pass


class BCApiError(BCClientError):
    """Business Central answered with a non-success status code"""

    def __init__(
        self,
        status_code: int,
        response_text: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.response_text = response_text
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed with status {status_code}: {response_text}")
