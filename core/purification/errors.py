from __future__ import annotations


class PurifierError(Exception):
    pass


class InvalidRequest(PurifierError):
    """Structurally invalid purification request (checked before any stage runs)."""
    pass


class TemplateTableError(PurifierError):
    """Fallback template table violates a load-time invariant."""
    pass


class ProviderError(PurifierError):
    """A provider produced no usable output. Never escapes the orchestrator."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
