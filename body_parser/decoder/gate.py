"""Eligibility gate: decides whether a request body is read at all."""

# Methods with no semantically defined request body.
NO_BODY_METHODS: frozenset[str] = frozenset({"CONNECT", "GET", "HEAD", "OPTIONS", "TRACE"})


def has_body_method(method: str, no_body_methods: frozenset[str] = NO_BODY_METHODS) -> bool:
    """Case-sensitive, as received from the host."""
    return method not in no_body_methods


def is_eligible(method: str, closed: bool, no_body_methods: frozenset[str] = NO_BODY_METHODS) -> bool:
    """Return True when the body should be drained.

    A request is skipped when its method carries no body or when its stream
    has already reached a terminal state (aborted, complete or destroyed).
    """
    return has_body_method(method, no_body_methods) and not closed
