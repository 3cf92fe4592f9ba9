"""Exception taxonomy.

A cache miss is not an error: stores return ``None`` for absent entries.
"""


class OfflineCacheError(Exception):
    """Base class for every error raised by this package."""


class OriginUnreachable(OfflineCacheError):
    """The origin could not be reached for a single request.

    Recovered inside the executors; only a pass-through request (no
    interception) lets it reach the embedding layer.
    """

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        message = f"origin unreachable for {url}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PopulationError(OfflineCacheError):
    """One or more install-time resource fetches failed."""

    def __init__(self, generation: str, failures: dict[str, str]) -> None:
        self.generation = generation
        self.failures = failures
        super().__init__(
            f"failed to populate {generation}: "
            + ", ".join(f"{url} ({reason})" for url, reason in sorted(failures.items()))
        )


class UnknownControlMessage(OfflineCacheError):
    """A control message type that the worker does not understand."""

    def __init__(self, message_type: str) -> None:
        self.message_type = message_type
        super().__init__(f"unknown control message: {message_type!r}")


class InvalidTransition(OfflineCacheError):
    """A lifecycle transition was requested from the wrong state."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"cannot {operation} while {state}")


class InvalidGenerationName(OfflineCacheError, ValueError):
    """A generation name that does not follow ``<app-id>-v<semver>``."""
