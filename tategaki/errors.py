class ConfigurationError(RuntimeError):
    """A required secret or credential is missing from the deployment."""


class TokenError(ValueError):
    pass


class InvalidCredentialsError(ValueError):
    pass


class EmailConflictError(ValueError):
    pass


class LoginRedirect(Exception):
    def __init__(self, location: str = "/login") -> None:
        super().__init__(location)
        self.location = location
