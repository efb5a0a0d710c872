import json
import os

from .io import Io

ROBOT_URL = f"ws://{Io.ACCESS_POINT}{Io.WS_PATH}"

class InvalidConfiguration(ValueError):
    pass

def _matches(expected: type, value) -> bool:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return expected is bool
    if expected is float:
        return isinstance(value, (int, float))
    return isinstance(value, expected)

class Configuration:
    robot_url: str = ROBOT_URL
    reconnect_delay: float = 1.0
    dry_run: bool = False
    settle_delay: float = 0.5
    turn_power: int = 15
    turn_phase_time: float = 1.3
    forward_power: int = 15
    forward_time_per_unit: float = 0.2

    def __init__(self, path: str = "config.json"):
        self.path = path
        obj = {}
        if os.path.exists(path):
            with open(path, "r") as f:
                obj = json.load(f)
        self.robot_url = obj.get("robot_url", ROBOT_URL)
        self.reconnect_delay = obj.get("reconnect_delay", 1.0)
        self.dry_run = obj.get("dry_run", False)
        self.settle_delay = obj.get("settle_delay", 0.5)
        self.turn_power = obj.get("turn_power", 15)
        self.turn_phase_time = obj.get("turn_phase_time", 1.3)
        self.forward_power = obj.get("forward_power", 15)
        self.forward_time_per_unit = obj.get("forward_time_per_unit", 0.2)

    def to_dict(self) -> dict:
        return {
            "robot_url": self.robot_url,
            "reconnect_delay": self.reconnect_delay,
            "dry_run": self.dry_run,
            "settle_delay": self.settle_delay,
            "turn_power": self.turn_power,
            "turn_phase_time": self.turn_phase_time,
            "forward_power": self.forward_power,
            "forward_time_per_unit": self.forward_time_per_unit
        }

    def update(self, values: dict):
        """
        Apply new values, all or nothing.

        Raises:
            KeyError: for a key that is not a configuration value
            InvalidConfiguration: for a value of the wrong type
        """
        for key, value in values.items():
            if key not in self.to_dict():
                raise KeyError(key)
            if not _matches(type(getattr(Configuration, key)), value):
                raise InvalidConfiguration(f"{key} must be of type {type(getattr(Configuration, key)).__name__}, got {value!r}")
        for key, value in values.items():
            setattr(self, key, value)

    def save(self):
        with open(self.path, "w") as f:
            json.dump(self.to_dict(), f)
