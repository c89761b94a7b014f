# Functions package for GlassTrace
"""
Concrete traceable functions.

Each function produces its own kind of witness, able to explain its
output more finely than the default "linked to all inputs" answer.
"""

from .basic import Add, Fork
from .quantifiers import Exists, ForAll, Quantifier
from .sequences import ApplyToAll
from .strings import RegexFind

__all__ = [
    "Add",
    "ApplyToAll",
    "Exists",
    "ForAll",
    "Fork",
    "Quantifier",
    "RegexFind",
]
