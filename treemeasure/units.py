"""
Distance conversion from data space to the diagram's native units.
"""

import math


class DistanceScale:
    """
    Converts data-space lengths to the host's native distance units.

    The host supplies a distance scalar: how many data units make up one
    native unit (for a phylogenetic tree, pixels per unit of branch length
    at zoom 1). Labels are always rendered with a fixed number of decimals.
    """

    DECIMALS = 6

    def __init__(self, distance_scalar=1.0, decimals=DECIMALS):
        """
        Initialize the distance scale.

        Args:
            distance_scalar: Data units per native unit (default: 1.0)
            decimals: Digits after the decimal point in labels (default: 6)
        """
        self.distance_scalar = distance_scalar
        self.decimals = decimals

    def measure(self, start, end):
        """
        Euclidean distance between two data-space points in native units.

        Args:
            start: Point in data space
            end: Point in data space

        Returns:
            Float distance, may be non-finite if the scalar is zero or invalid
        """
        length = math.hypot(end.x - start.x, end.y - start.y)
        return self.to_native_units(length)

    def to_native_units(self, length):
        """Convert a data-space length to native units"""
        if not math.isfinite(self.distance_scalar):
            return math.nan
        try:
            return length / self.distance_scalar
        except ZeroDivisionError:
            # 0 / 0 has no meaningful distance, anything else diverges
            return math.nan if length == 0 else math.inf

    def format(self, distance):
        """
        Format a distance for the overlay label.

        Returns:
            String such as "5.000000", or None if the distance is not finite
        """
        if not math.isfinite(distance):
            return None
        return f"{distance:.{self.decimals}f}"
