"""Error taxonomy for the sommelier service.

Two families live here:

- ``GenerationError`` and subclasses describe recoverable failures of the
  generation gateway. They travel inside ``GatewayResult.error`` and are
  absorbed by the orchestrator, which substitutes a deterministic reply.
- ``ContractViolation`` and subclasses are programmer errors (unknown tier,
  unknown category key). They are raised and never retried.
"""


class GenerationError(Exception):
    """Base exception for generation gateway failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoCredentialsConfigured(GenerationError):
    """No provider has an API credential configured."""

    def __init__(self, message: str = "No API keys configured"):
        super().__init__(message)


class ProviderCallFailed(GenerationError):
    """A single provider call failed (network, status, or malformed body)."""

    def __init__(self, provider: str, detail: str, status_code: int | None = None):
        super().__init__(f"{provider}: {detail}")
        self.provider = provider
        self.detail = detail
        self.status_code = status_code


class AllProvidersFailed(GenerationError):
    """Every configured provider was tried and failed."""

    def __init__(self, message: str, attempts: list[str] | None = None):
        super().__init__(message)
        self.attempts = attempts or []


class MalformedGenerationOutput(GenerationError):
    """A structured object was expected but is absent or unparseable."""


class ContractViolation(ValueError):
    """Base class for caller-side programming errors."""


class UnknownTierError(ContractViolation):
    """Requested model tier is not one of fast/standard/powerful."""


class UnknownCategoryError(ContractViolation):
    """Intent category or category sub-key has no registered handler."""


class CatalogError(ValueError):
    """The static catalog definition violates an invariant."""
