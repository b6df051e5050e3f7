"""Custom exceptions for clearer error handling across the card runtime."""


class TokenCardError(Exception):
    """Base exception for all tokencard-specific errors."""


class ConfigError(TokenCardError, ValueError):
    """Raised when environment or CLI configuration is invalid."""


class HistoryProviderError(TokenCardError):
    """Raised when price history retrieval fails."""
