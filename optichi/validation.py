"""
Strict-mode input checks.

By default every formula in optichi lets out-of-domain inputs propagate as
nan/inf through numpy arithmetic. Passing ``strict=True`` to a public
function routes its inputs through the checks below, which raise
:class:`DomainError` instead.
"""
import numpy as np


class DomainError(ValueError):
    """Raised in strict mode when an input lies outside a formula's domain."""


def check_positive(name, values):
    """Raise if any of `values` is not strictly positive (nan included)."""
    values = np.asarray(values, dtype=float)
    invalid = ~(values > 0)
    if np.any(invalid):
        raise DomainError(f"{name} must be > 0, got {_offending(values, invalid)}")


def check_non_negative(name, values):
    """Raise if any of `values` is negative or nan."""
    values = np.asarray(values, dtype=float)
    invalid = ~(values >= 0)
    if np.any(invalid):
        raise DomainError(f"{name} must be >= 0, got {_offending(values, invalid)}")


def check_open_interval(name, values, lower=0.0, upper=1.0, lower_name=None):
    """
    Raise if any of `values` lies outside the open interval (lower, upper).

    `lower` may be an array broadcastable against `values`, e.g. Gstar / ca.
    """
    values = np.asarray(values, dtype=float)
    invalid = ~((values > lower) & (values < upper))
    if np.any(invalid):
        if lower_name is None:
            lower_name = f"{float(np.max(lower)):g}"
        raise DomainError(
            f"{name} must lie in ({lower_name}, {upper:g}), got {_offending(values, invalid)}"
        )


def _offending(values, invalid):
    if np.ndim(invalid) == 0:
        return f"{float(values):g}"
    offending = np.broadcast_to(values, np.shape(invalid))[invalid]
    return f"{offending.size} invalid value(s), e.g. {offending.flat[0]:g}"
