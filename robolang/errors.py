"""
robolang.errors – иерархия исключений парсера и интерпретатора.
"""

from __future__ import annotations

from typing import Sequence


# --------------------- Базовый класс -----------------------------------
class RobolangError(Exception):
    pass


# --------------------- Ошибка разбора ----------------------------------
class ParseError(RobolangError):
    """Текст программы не соответствует грамматике.

    ``context`` – до пяти токенов, следующих за местом ошибки.
    """

    def __init__(self, message: str, context: Sequence[str] = ()):
        self.message = message
        self.context = list(context)
        super().__init__(self._format())

    def _format(self) -> str:
        tail = "".join(" " + tok for tok in self.context)
        return f"{self.message}\n   @ ...{tail}..."


# --------------------- Ошибки выполнения -------------------------------
class RobotArithmeticError(RobolangError, ArithmeticError):
    """Целочисленное деление на ноль."""


class UnknownValueError(RobolangError, ValueError):
    """Значение перечисления дошло до вычисления без обработчика."""


class ExecutionCancelled(RobolangError):
    """Хост выставил сигнал отмены."""
