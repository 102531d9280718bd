"""Exceptions raised by the shattering pipeline."""


class ShatterError(Exception):
    """Base class for every shattering failure."""


class ConfigurationError(ShatterError, ValueError):
    """Panel or grid parameters that can never produce a valid shatter.

    Raised before any geometry is generated.
    """


class PartitionError(ShatterError):
    """Voronoi partitioning rejected the seed points."""


class TriangulationError(ShatterError):
    """A cell polygon could not be triangulated."""


class ColliderError(ShatterError):
    """A convex collider could not be built for an extruded cell."""


class PanelStateError(ShatterError):
    """Operation not allowed in the panel's current state."""
