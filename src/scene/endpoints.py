from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Union
import logging

from src.physics.model import Point3

logger = logging.getLogger(__name__)

PointLike = Union[Point3, Sequence[float]]


class EndpointProvider(ABC):
    """Supplies one end of the arc on demand, typically once per frame."""

    @abstractmethod
    def position(self) -> Optional[Point3]:
        """Current position, or None when the endpoint is not available."""

    @abstractmethod
    def set_position(self, point: PointLike) -> bool:
        """Assign the endpoint from code. Returns False if this provider does not accept it."""


class FixedEndpoint(EndpointProvider):
    """Endpoint assigned in code and held until reassigned."""

    def __init__(self, point: Optional[PointLike] = None):
        self._point = Point3.from_any(point) if point is not None else None

    def position(self) -> Optional[Point3]:
        return self._point

    def set_position(self, point: PointLike) -> bool:
        self._point = Point3.from_any(point)
        return True

    def __repr__(self) -> str:
        return f"FixedEndpoint({self._point})"


class TrackedEndpoint(EndpointProvider):
    """Endpoint that follows an external object.

    The source is either a callable returning a point, or any object with a
    ``position`` attribute (a scene node, a transform). The tracked object owns
    the value, so set_position is refused.
    """

    def __init__(self, source: Any = None, name: str = "endpoint"):
        self.source = source
        self.name = name

    def position(self) -> Optional[Point3]:
        if self.source is None:
            return None
        value = self.source() if callable(self.source) else getattr(self.source, "position", None)
        if value is None:
            return None
        return Point3.from_any(value)

    def set_position(self, point: PointLike) -> bool:
        logger.debug(f"Ignoring set_position on tracked {self.name}")
        return False

    def __repr__(self) -> str:
        return f"TrackedEndpoint({self.name!r}, source={self.source!r})"
