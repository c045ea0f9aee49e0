"""
Model layer for workflow generation.

Components:
- Providers: interchangeable model backends (Strategy Pattern)
- Factory: builds the configured provider
- Observers: monitoring of generation and validation events
- Services: graph analysis and the complexity heuristic
"""

from .factory import IAProviderFactory
from .providers import GeminiProvider, IAProviderStrategy, MockIAProvider, OpenAIProvider

__all__ = [
    "IAProviderStrategy",
    "MockIAProvider",
    "OpenAIProvider",
    "GeminiProvider",
    "IAProviderFactory",
]
