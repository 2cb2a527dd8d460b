"""
Error kinds raised by the tile pipeline.

All of them are ValueError subclasses, so callers that only care about
"bad input or bad state" can keep catching ValueError.
"""


class FormatError(ValueError):
    """Malformed puzzle input: bad header, ragged rows, non-numeric id."""


class MatchAmbiguityError(ValueError):
    """
    Internal invariant violation in the match bookkeeping.

    Raised when a side would hold two different neighbors, when a tile
    would exceed four matches, or when edge stripping is asked to remove
    the same side twice. Never expected on well-formed puzzles.
    """


class NoCornersFoundError(ValueError):
    """No tile has exactly two matches (unsolvable input or a too-narrow matcher)."""


class AssemblyError(ValueError):
    """The recorded matches do not describe one consistent rectangular layout."""
