"""
robolang.lexer – лексический анализатор языка управления роботом.

Токены разделяются пробельными символами; кроме того, каждый из символов
``{ } ( ) , ;`` всегда образует отдельный токен, даже без пробелов вокруг.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, NoReturn, Optional, Pattern, Union

import ply.lex as lex

from .errors import ParseError

# --------------------- пробелы (только ASCII) ----------------------------
t_ignore = ' \t\r\f\v'

# --------------------- токены -------------------------------------------
tokens = (
    'PUNCT',
    'WORD',
)

t_PUNCT = r'[{}(),;]'
t_WORD  = r'[^ \t\n\r\f\v{}(),;]+'


# --------------------- новая строка (для подсчёта lineno) ---------------
def t_newline(t):
    r'\n+'
    t.lexer.lineno += len(t.value)


# --------------------- ошибка лексера -----------------------------------
def t_error(t):
    raise ParseError(f"Illegal char {t.value[0]!r} line {t.lineno}")


# ---------------------------------------------------------------------------
lexer = lex.lex()

CONTEXT_TOKENS = 5


@dataclass(frozen=True)
class Token:
    text: str
    line: int = 1


def tokenize(text: str) -> List[Token]:
    """Возвращает все токены текста списком (для тестов и отладки)."""
    lx = lexer.clone()
    lx.input(text)
    return [Token(tok.value, tok.lineno) for tok in lx]


# ----------------------------------------------------------------------
#  Поток токенов для рекурсивного спуска
# ----------------------------------------------------------------------
class TokenStream:
    """Ленивый поток токенов с просмотром на один токен вперёд."""

    def __init__(self, text: str):
        self._lexer = lexer.clone()
        self._lexer.lineno = 1
        self._lexer.input(text)
        self._buffer: Deque[Token] = deque()
        self._exhausted = False

    def _fill(self) -> bool:
        if not self._buffer and not self._exhausted:
            tok = self._lexer.token()
            if tok is None:
                self._exhausted = True
            else:
                self._buffer.append(Token(tok.value, tok.lineno))
        return bool(self._buffer)

    def has_next(self) -> bool:
        return self._fill()

    def peek(self) -> Optional[str]:
        return self._buffer[0].text if self._fill() else None

    def peek_matches(self, pattern: Union[str, Pattern[str]]) -> bool:
        if not self._fill():
            return False
        return re.fullmatch(pattern, self._buffer[0].text) is not None

    def next(self) -> str:
        if not self._fill():
            self.fail("Unexpected end of input")
        return self._buffer.popleft().text

    def require(self, pattern: Union[str, Pattern[str]], message: str) -> str:
        if self.peek_matches(pattern):
            return self.next()
        self.fail(message)

    def fail(self, message: str) -> NoReturn:
        context = []
        while len(context) < CONTEXT_TOKENS and self._fill():
            context.append(self._buffer.popleft().text)
        raise ParseError(message, context)
