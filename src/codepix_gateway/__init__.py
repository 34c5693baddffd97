from .config import CodePixConfig
from .contracts import CompletionRequest, CompletionResult, ProviderConfig
from .errors import (
    InputMissingError,
    ProviderCallFailedError,
    ProviderError,
    ProviderUnavailableError,
    UnsupportedProviderError,
)
from .extraction import extract_code_block
from .gateway import ProviderGateway
from .pipeline import CodeAssistant
from .providers import GeminiProvider, GroqProvider, Provider

__all__ = [
    "CodeAssistant",
    "CodePixConfig",
    "CompletionRequest",
    "CompletionResult",
    "GeminiProvider",
    "GroqProvider",
    "InputMissingError",
    "Provider",
    "ProviderCallFailedError",
    "ProviderConfig",
    "ProviderError",
    "ProviderGateway",
    "ProviderUnavailableError",
    "UnsupportedProviderError",
    "extract_code_block",
]
