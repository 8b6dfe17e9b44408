"""Exception hierarchy for the answer engine."""


class NicodemosError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(NicodemosError, ValueError):
    """Required configuration (usually a credential) is missing or invalid."""


class BackendError(NicodemosError):
    """A single backend model identifier failed to produce a completion."""

    def __init__(self, model: str, message: str, status_code: int | None = None) -> None:
        self.model = model
        self.message = message
        self.status_code = status_code
        status = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"Backend '{model}' failed{status}: {message}")


class ExhaustionError(NicodemosError):
    """Every configured backend identifier failed."""

    def __init__(self, failures: list[BackendError]) -> None:
        self.failures = list(failures)
        tried = ", ".join(failure.model for failure in self.failures) or "none"
        super().__init__(f"All backend models failed (tried: {tried})")


class ParseError(NicodemosError):
    """Backend payload is not a usable JSON object."""


class DeliberationFailure(NicodemosError):
    """A completion call inside the deliberation loop failed."""

    def __init__(self, stage: str, iteration: int, message: str) -> None:
        self.stage = stage
        self.iteration = iteration
        super().__init__(f"Deliberation failed during {stage} (iteration {iteration}): {message}")
