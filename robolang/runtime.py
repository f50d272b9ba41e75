"""
robolang.runtime – рантайм: хранилище переменных, контекст выполнения
и точка входа ``execute``.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, Iterator, Optional

from .errors import ExecutionCancelled

if TYPE_CHECKING:
    from .ast import Program
    from .robot import Robot

logger = logging.getLogger(__name__)

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def wrap_int32(v: int) -> int:
    """Приводит целое к 32-битному знаковому (переполнение по модулю 2**32)."""
    return (v - INT_MIN) % 2 ** 32 + INT_MIN


# ----------------------------------------------------------------------
#  Хранилище переменных
# ----------------------------------------------------------------------
class VariableStore:
    """Имя → целое. Чтение незаданной переменной заводит её со значением 0.

    Одно хранилище на всё выполнение программы, без областей видимости.
    """

    def __init__(self, initial: Optional[Dict[str, int]] = None):
        self.vars: Dict[str, int] = dict(initial or {})

    def __getitem__(self, name: str) -> int:
        return self.vars.setdefault(name, 0)

    def __setitem__(self, name: str, value: int):
        self.vars[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def __len__(self) -> int:
        return len(self.vars)

    def as_dict(self) -> Dict[str, int]:
        return dict(self.vars)

    def __repr__(self):
        return f"VariableStore({self.vars})"


# ----------------------------------------------------------------------
#  Контекст выполнения
# ----------------------------------------------------------------------
class ExecutionContext:
    """Всё, что нужно узлам при выполнении одной программы."""

    def __init__(self, robot: Robot,
                 variables: Optional[VariableStore] = None,
                 cancel: Optional[threading.Event] = None):
        self.robot = robot
        self.variables = variables if variables is not None else VariableStore()
        self.cancel_event = cancel if cancel is not None else threading.Event()

    def cancel(self) -> None:
        self.cancel_event.set()

    def checkpoint(self) -> None:
        if self.cancel_event.is_set():
            raise ExecutionCancelled("program execution cancelled")


def execute(program: Program, robot: Robot, *,
            variables: Optional[VariableStore] = None,
            cancel: Optional[threading.Event] = None) -> ExecutionContext:
    """Выполняет программу на роботе и возвращает использованный контекст.

    Ошибки выполнения (деление на ноль, отмена, исключения робота)
    пробрасываются вызывающему.
    """
    ctx = ExecutionContext(robot, variables, cancel)
    logger.debug("executing program with %d statement(s)", len(program.statements))
    try:
        program.execute(ctx)
    except ExecutionCancelled:
        logger.warning("execution cancelled; variables: %s", ctx.variables.as_dict())
        raise
    logger.debug("execution finished; variables: %s", ctx.variables.as_dict())
    return ctx
