import math
from dataclasses import dataclass, field
from math import pi

EPS = 0.001
FULL_TURN = 2 * pi

def normalize_angle(angle: float) -> float:
    """
    Bring an angle into [0, 2*pi).

    Anything that lands within EPS of zero is returned as exactly 0, so
    floating point noise never turns into a spurious rotation.
    """
    result = angle - math.floor(angle / FULL_TURN) * FULL_TURN
    if result > EPS:
        return result
    return 0.0

def degrees_to_radians(degrees: float) -> float:
    return (degrees * FULL_TURN) / 360

def length(p1: tuple[float, float], p2: tuple[float, float]) -> float:
    dx = p2[0] - p1[0]
    dy = p2[1] - p1[1]
    return math.sqrt(dx * dx + dy * dy)

def to_polar(dx: float, dy: float) -> tuple[float, float]:
    """
    Convert a displacement vector into (phi, r).

    The angle is measured against the reference axis (1, 0) with the law of
    cosines, so acos only covers [0, pi]; vectors pointing into the lower
    half-plane are mirrored to 2*pi - phi.

    Args:
        dx: horizontal component
        dy: vertical component

    Returns:
        tuple[float, float]: absolute angle in [0, 2*pi) and length. A vector
        shorter than EPS has angle 0.
    """
    r = math.sqrt(dx * dx + dy * dy)
    phi = 0.0

    if r > EPS:
        c = length((dx, dy), (r, 0))
        cos_phi = 1 - (c * c) / (2 * r * r)
        phi = math.acos(max(-1.0, min(1.0, cos_phi)))

        if dy < -EPS:
            phi = FULL_TURN - phi

    return phi, r

def from_polar(phi: float, r: float) -> tuple[float, float]:
    return r * math.cos(phi), r * math.sin(phi)

@dataclass
class Pose:
    position: tuple[float, float] = (0.0, 0.0)
    # facing up the page
    heading: float = pi / 2

    def advance(self, vector: tuple[float, float], heading: float):
        self.position = (self.position[0] + vector[0], self.position[1] + vector[1])
        self.heading = normalize_angle(heading)

@dataclass(frozen=True)
class PolarDisplacement:
    turn: float
    distance: float
    vector: tuple[float, float] = field(default=(0.0, 0.0))
    heading: float = 0.0
