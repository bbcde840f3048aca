"""Exceptions raised by the engine in strict mode."""


class ERVServiceError(Exception):
    """Base class for engine errors."""


class UnknownModelError(ERVServiceError):
    """An ERV size selection or unit model is not in the reference tables."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"Unknown {kind}: {name!r}")


class UnknownLocationError(UnknownModelError):
    """A location could not be matched to an altitude."""

    def __init__(self, name: str) -> None:
        super().__init__("location", name)
