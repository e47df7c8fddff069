"""
Custom exceptions for anyroute.

Only programmer misuse raises. An unroutable packet is a normal outcome
(a drop), never an exception.
"""


class AnyrouteError(Exception):
    """Base exception for all anyroute errors."""
    pass


# ---------------- Validation Errors ----------------

class ValidationError(AnyrouteError):
    """Construction-time validation failed."""
    pass


class InvalidDistanceError(ValidationError):
    """Distance function is not callable."""

    def __init__(self, value: object):
        super().__init__(
            f"Distance function must be callable or None, got {type(value).__name__}"
        )
        self.value = value


class InvalidNodeError(ValidationError):
    """Object does not satisfy the Node contract."""

    def __init__(self, value: object):
        super().__init__(
            f"Expected a Node with address and handle_packet, got {type(value).__name__}"
        )
        self.value = value


class InvalidRouterError(ValidationError):
    """Object does not satisfy the Router contract."""

    def __init__(self, value: object):
        super().__init__(
            f"Expected a Router with a callable route(), got {type(value).__name__}"
        )
        self.value = value


class InvalidHopLimitError(ValidationError):
    """Hop limit is not a non-negative integer."""

    def __init__(self, hop_limit: object):
        super().__init__(f"Invalid hop limit: {hop_limit!r} (must be an int >= 0)")
        self.hop_limit = hop_limit


# ---------------- Topology Errors ----------------

class TopologyError(AnyrouteError):
    """Base class for topology description errors."""
    pass


class UnknownNodeError(TopologyError):
    """Topology references a node name that was never declared."""

    def __init__(self, name: str):
        super().__init__(f"Unknown node '{name}'")
        self.name = name


class UnknownDistanceError(TopologyError):
    """Topology names a distance function that does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Unknown distance function '{name}'")
        self.name = name
