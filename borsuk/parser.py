import re

from .drawing import COMMANDS, Command

# every line carries two numbers and a keyword
ARGS = 3

_INTEGER = re.compile(r"[+-]?\d+")

class ParseError(Exception):
    message = "Invalid line"

    def __init__(self, line_number: int):
        super().__init__(f"{self.message} {line_number}.")
        self.line_number = line_number

class MalformedLine(ParseError):
    message = "Invalid number of arguments on line"

class UnknownCommand(ParseError):
    message = "Unknown command on line"

class InvalidNumber(ParseError):
    message = "Invalid numeric values on line"

def parse_line(line: str, line_number: int) -> Command:
    values = line.split()
    if len(values) != ARGS:
        raise MalformedLine(line_number)

    command = COMMANDS.get(values[2])
    if command is None:
        raise UnknownCommand(line_number)

    if not (_INTEGER.fullmatch(values[0]) and _INTEGER.fullmatch(values[1])):
        raise InvalidNumber(line_number)

    return command(int(values[0]), int(values[1]))

def parse_lines(lines: list[str]) -> list[Command]:
    """
    Turn instruction lines into commands.

    Parsing stops at the first bad line; nothing parsed before it is returned.

    Args:
        lines: The file contents, one instruction per line

    Returns:
        The commands in file order

    Raises:
        ParseError: MalformedLine, UnknownCommand or InvalidNumber carrying the
            1-based line number.
    """
    return [parse_line(line, index + 1) for index, line in enumerate(lines)]

def parse(text: str) -> list[Command]:
    return parse_lines(text.split("\n"))
