"""Resource wrappers built on top of the network core."""

from .base import ResourceBase
from .generative import (
    CartoonizeOptions,
    CartoonStyle,
    GenerateContentResponse,
    GenerativeImageResource,
)

__all__ = [
    "CartoonStyle",
    "CartoonizeOptions",
    "GenerateContentResponse",
    "GenerativeImageResource",
    "ResourceBase",
]
