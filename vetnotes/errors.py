class ValidationError(ValueError):
    """Malformed or missing request field. Surfaced to clients as a 400."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class InvalidArgument(ValidationError):
    """Relay store called with an absent key or payload."""


class GenerationError(Exception):
    """Base for every outcome of a generation call that must trigger the fallback path."""


class ProviderError(GenerationError):
    """Transport, auth, quota or timeout failure from the text-generation provider."""


class EmptyResponse(GenerationError):
    """The provider answered, but with blank text."""
