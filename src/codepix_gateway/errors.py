from __future__ import annotations


class ProviderError(Exception):
    """Base error for gateway and provider failures."""


class InputMissingError(ProviderError):
    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f'Missing "{field}" in request body')
        self.field = field


class UnsupportedProviderError(ProviderError):
    def __init__(self, provider: str, supported: tuple[str, ...] = ()):
        names = " and ".join(f"'{s}'" for s in supported)
        message = f"Unsupported model provider: {provider}."
        if names:
            message += f" Supported providers are {names}."
        super().__init__(message)
        self.provider = provider


class ProviderUnavailableError(ProviderError):
    """Selected provider had no credential when the gateway was built."""

    def __init__(self, provider: str, env_var: str, dependency: str):
        super().__init__(
            f"{provider.capitalize()} client not available. Please check {env_var} environment variable "
            f"and ensure {dependency} library is installed."
        )
        self.provider = provider
        self.env_var = env_var


class ProviderCallFailedError(ProviderError):
    """The upstream call itself failed; message is the provider's own."""

    def __init__(self, message: str, *, provider: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
