"""
robolang – парсер и интерпретатор языка управления роботом.
"""

from .errors import (
    ExecutionCancelled, ParseError, RobolangError,
    RobotArithmeticError, UnknownValueError,
)
from .parser import parse, parse_file
from .robot import LoggingRobot, Robot
from .runtime import ExecutionContext, VariableStore, execute

__all__ = [
    "parse", "parse_file", "execute",
    "ExecutionContext", "VariableStore", "Robot", "LoggingRobot",
    "RobolangError", "ParseError", "RobotArithmeticError",
    "UnknownValueError", "ExecutionCancelled",
]
