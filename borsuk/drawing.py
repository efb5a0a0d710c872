import abc
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from .geometry import EPS, Pose, PolarDisplacement, degrees_to_radians, from_polar, normalize_angle, to_polar

if TYPE_CHECKING:
    from .driver import Borsuk

logger = logging.getLogger(__name__)

def _towards(pose: Pose, dx: float, dy: float) -> PolarDisplacement:
    phi, r = to_polar(dx, dy)
    if r <= EPS:
        return PolarDisplacement(0.0, 0.0, (dx, dy), pose.heading)
    return PolarDisplacement(normalize_angle(phi - pose.heading), r, (dx, dy), phi)

class Command(abc.ABC):
    keyword: str = ""

    @abc.abstractmethod
    def displacement(self, pose: Pose) -> PolarDisplacement:
        pass

@dataclass(frozen=True)
class LineTo(Command):
    keyword = "lineto"

    x: int
    y: int

    def displacement(self, pose: Pose) -> PolarDisplacement:
        return _towards(pose, self.x - pose.position[0], self.y - pose.position[1])

@dataclass(frozen=True)
class RelativeLineTo(Command):
    keyword = "rlineto"

    dx: int
    dy: int

    def displacement(self, pose: Pose) -> PolarDisplacement:
        return _towards(pose, self.dx, self.dy)

@dataclass(frozen=True)
class RelativeLineRot(Command):
    """Turn to an absolute heading given in degrees, then drive `distance` forward."""
    keyword = "rlinerot"

    angle: int
    distance: int

    def displacement(self, pose: Pose) -> PolarDisplacement:
        phi = degrees_to_radians(self.angle)
        r = float(self.distance)
        vector = from_polar(phi, r)
        if r < 0:
            # same vector, driven forward along the opposite heading
            phi, r = phi + degrees_to_radians(180), -r
        phi = normalize_angle(phi)
        return PolarDisplacement(normalize_angle(phi - pose.heading), r, vector, phi)

COMMANDS: dict[str, type[Command]] = {
    cls.keyword: cls for cls in (LineTo, RelativeLineTo, RelativeLineRot)
}

@dataclass
class DrawingState:
    pose: Pose = field(default_factory=Pose)

    async def perform(self, command: Command, robot: 'Borsuk') -> PolarDisplacement:
        displacement = command.displacement(self.pose)
        logger.debug(f"{command}: turn {displacement.turn:.3f} rad, forward {displacement.distance:.3f}")

        await robot.turn_by(displacement.turn)
        await robot.go_forward(displacement.distance)

        self.pose.advance(displacement.vector, displacement.heading)
        return displacement

    def plan(self, commands: list[Command]) -> Iterator[tuple[Command, PolarDisplacement, tuple[float, float]]]:
        """Walk the commands without moving the robot, yielding each step and the position it ends at."""
        for command in commands:
            displacement = command.displacement(self.pose)
            self.pose.advance(displacement.vector, displacement.heading)
            yield command, displacement, self.pose.position
