"""Error kinds raised by the ray tracer.

Both concrete errors subclass ValueError so callers that already guard
against bad parameters with ``except ValueError`` keep working.
"""


class RayTracerError(Exception):
    """Base class for all ray tracer errors."""


class DegenerateTransformError(RayTracerError, ValueError):
    """A matrix with a near-zero determinant was inverted.

    Raised when a transform is assigned to a shape, pattern or camera, never
    deferred to render time.
    """


class ZeroVectorNormalizationError(RayTracerError, ValueError):
    """A vector with near-zero magnitude was normalized."""
