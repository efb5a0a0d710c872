from dataclasses import dataclass
from enum import Enum

class Severity(Enum):
    INFO = "info"
    ERROR = "error"

@dataclass(frozen=True)
class Status:
    message: str
    severity: Severity = Severity.INFO

    def to_dict(self) -> dict:
        return {"message": self.message, "severity": self.severity.value}

    @staticmethod
    def error(message: str) -> 'Status':
        return Status(message, Severity.ERROR)

IDLE = Status("Load a drawing file.")
READY = Status("File ready!")
RUNNING = Status("Drawing started!")
FINISHED = Status("Drawing finished.")
ABORTED = Status.error("Drawing aborted! Load the file again to start over.")
