"""
robolang.parser – рекурсивный спуск по грамматике языка управления роботом.

Каждая функция ``parse_*`` соответствует одному правилу грамматики (правило
записано в её docstring), читает ровно свои токены из ``TokenStream`` и
возвращает узел AST. Ошибка разбора – ``ParseError``; внутри парсера она не
перехватывается.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Union

from .ast import (
    COUNTED_ACTIONS, RANKED_SENSORS,
    Action, ActionKind, Assignment, Block, Combinator, Condition,
    Expression, If, Loop, Number, Operator, Program, Relop,
    Sensor, SensorKind, Statement, Variable, While,
)
from .config import settings
from .errors import ParseError
from .lexer import TokenStream
from .runtime import INT_MAX, INT_MIN

logger = logging.getLogger(__name__)

# --------------------- Шаблоны токенов -------------------------------
NUMPAT = re.compile(r'-?[0-9]+')
VARPAT = re.compile(r'\$[A-Za-z][A-Za-z0-9]*')
OPENPAREN = re.compile(r'\(')
CLOSEPAREN = re.compile(r'\)')
OPENBRACE = re.compile(r'\{')
CLOSEBRACE = re.compile(r'\}')
COMMA = re.compile(r',')
SEMICOLON = re.compile(r';')
ASSIGN = re.compile(r'=')
LOOPPAT = re.compile(r'loop')
IFPAT = re.compile(r'if')
ELIFPAT = re.compile(r'elif')
ELSEPAT = re.compile(r'else')
WHILEPAT = re.compile(r'while')


def _keywords(kinds) -> re.Pattern:
    return re.compile('|'.join(re.escape(k.value) for k in kinds))


ACTPAT = _keywords(ActionKind)
SENPAT = _keywords(SensorKind)
OPPAT = _keywords(Operator)
RELOPPAT = _keywords(Relop)


# --------------------- Программа и операторы ----------------------------

def parse_program(s: TokenStream) -> Program:
    'PROGRAM ::= STATEMENT+'
    statements = [parse_statement(s)]
    while s.has_next():
        statements.append(parse_statement(s))
    return Program(statements)


def parse_statement(s: TokenStream) -> Statement:
    'STATEMENT ::= ACTION ";" | LOOP | IF | WHILE | ASSIGNMENT'
    if s.peek_matches(ACTPAT):
        return parse_action(s)
    if s.peek_matches(LOOPPAT):
        return parse_loop(s)
    if s.peek_matches(IFPAT):
        return parse_if(s)
    if s.peek_matches(WHILEPAT):
        return parse_while(s)
    if s.peek_matches(VARPAT):
        return parse_assignment(s)
    s.fail("Not a valid statement")


def parse_action(s: TokenStream) -> Action:
    'ACTION ::= actKeyword [ "(" EXPR ")" ] ";"'
    kind = ActionKind(s.require(ACTPAT, "Not a valid action"))
    count = None
    if kind in COUNTED_ACTIONS and s.peek_matches(OPENPAREN):
        s.require(OPENPAREN, "Missing ( in action")
        count = parse_expression(s)
        s.require(CLOSEPAREN, "Missing ) in action")
    s.require(SEMICOLON, "Missing semicolon")
    return Action(kind, count)


def parse_loop(s: TokenStream) -> Loop:
    'LOOP ::= "loop" BLOCK'
    s.require(LOOPPAT, "not a valid loop")
    return Loop(parse_block(s))


def parse_while(s: TokenStream) -> While:
    'WHILE ::= "while" "(" COND ")" BLOCK'
    s.require(WHILEPAT, "Missing while keyword")
    s.require(OPENPAREN, "Missing ( in while statement")
    cond = parse_condition(s)
    s.require(CLOSEPAREN, "Missing ) in while statement")
    return While(cond, parse_block(s))


def parse_if(s: TokenStream) -> If:
    'IF ::= "if" "(" COND ")" BLOCK ( ELIF )* [ "else" BLOCK ]'
    s.require(IFPAT, "Missing if keyword")
    s.require(OPENPAREN, "Missing ( in if statement")
    cond = parse_condition(s)
    s.require(CLOSEPAREN, "Missing ) in if statement")
    body = parse_block(s)
    elifs = []
    while s.peek_matches(ELIFPAT):
        elifs.append(parse_elif(s))
    else_body = None
    if s.peek_matches(ELSEPAT):
        s.require(ELSEPAT, "Missing else keyword")
        else_body = parse_block(s)
    return If(cond, body, elifs, else_body)


def parse_elif(s: TokenStream) -> If:
    'ELIF ::= "elif" "(" COND ")" BLOCK'
    s.require(ELIFPAT, "Missing elif keyword")
    s.require(OPENPAREN, "Missing ( in elif statement")
    cond = parse_condition(s)
    s.require(CLOSEPAREN, "Missing ) in elif statement")
    return If(cond, parse_block(s))


def parse_assignment(s: TokenStream) -> Assignment:
    'ASSIGNMENT ::= VAR "=" EXPR ";"'
    target = parse_variable(s)
    s.require(ASSIGN, "Missing = in assignment")
    expr = parse_expression(s)
    s.require(SEMICOLON, "Missing ; in assignment")
    return Assignment(target, expr)


def parse_block(s: TokenStream) -> Block:
    'BLOCK ::= "{" STATEMENT+ "}"'
    s.require(OPENBRACE, "Missing { for block")
    statements = [parse_statement(s)]
    while not s.peek_matches(CLOSEBRACE):
        statements.append(parse_statement(s))
    s.require(CLOSEBRACE, "Missing } for block")
    return Block(statements)


# --------------------- Условия ----------------------------------------

def parse_condition(s: TokenStream) -> Condition:
    '''COND ::= relop "(" EXPR "," EXPR ")"
             | ("and" | "or") "(" COND "," COND ")"
             | "not" "(" COND ")"'''
    if s.peek_matches(RELOPPAT):
        relop = Relop(s.next())
        s.require(OPENPAREN, "Missing ( in relop condition")
        left = parse_expression(s)
        s.require(COMMA, "Missing a comma in relop condition")
        right = parse_expression(s)
        node = Condition(relop=relop, exprs=[left, right])
    else:
        if not s.has_next():
            s.fail("Not a valid conditional")
        word = s.next()
        if word in (Combinator.AND.value, Combinator.OR.value):
            s.require(OPENPAREN, f"Missing ( in {word} condition")
            first = parse_condition(s)
            s.require(COMMA, f"Missing a comma in {word} condition")
            second = parse_condition(s)
            node = Condition(combinator=Combinator(word), conds=[first, second])
        elif word == Combinator.NOT.value:
            s.require(OPENPAREN, "Missing ( in not condition")
            node = Condition(combinator=Combinator.NOT, conds=[parse_condition(s)])
        else:
            s.fail("Not a valid conditional")
    s.require(CLOSEPAREN, "Missing ) in condition")
    return node


# --------------------- Выражения ----------------------------------------

def parse_expression(s: TokenStream) -> Expression:
    'EXPR ::= SENSOR | NUMBER | VAR | op "(" EXPR "," EXPR ")"'
    if s.peek_matches(SENPAT):
        return Expression([parse_sensor(s)])
    if s.peek_matches(NUMPAT):
        return Expression([parse_number(s)])
    if s.peek_matches(VARPAT):
        return Expression([parse_variable(s)])
    if s.peek_matches(OPPAT):
        op = Operator(s.next())
        s.require(OPENPAREN, "Missing ( in expression")
        left = parse_expression(s)
        s.require(COMMA, "Missing comma in expression")
        right = parse_expression(s)
        s.require(CLOSEPAREN, "Missing ) in expression")
        return Expression([left, right], op)
    s.fail("not a valid expression")


def parse_sensor(s: TokenStream) -> Sensor:
    'SENSOR ::= sensorKeyword [ "(" EXPR ")" ]'
    kind = SensorKind(s.require(SENPAT, "Not a valid sensor"))
    rank = None
    if kind in RANKED_SENSORS and s.peek_matches(OPENPAREN):
        s.require(OPENPAREN, "Missing ( in sensor")
        rank = parse_expression(s)
        s.require(CLOSEPAREN, "Missing ) in sensor")
    return Sensor(kind, rank)


def parse_number(s: TokenStream) -> Number:
    'NUMBER ::= "-"? digit+'
    if s.peek_matches(NUMPAT):
        value = int(s.peek())
        # только 32-битные знаковые целые
        if INT_MIN <= value <= INT_MAX:
            s.next()
            return Number(value)
    s.fail("not a valid integer")


def parse_variable(s: TokenStream) -> Variable:
    'VAR ::= "$" letter ( letter | digit )*'
    return Variable(s.require(VARPAT, "Not a valid variable name"))


# --------------------- Точки входа ----------------------------------------

def parse(src: str) -> Program:
    """Разбирает текст программы целиком; частичное дерево не возвращается."""
    program = parse_program(TokenStream(src))
    logger.debug("parsed program with %d statement(s)", len(program.statements))
    return program


def parse_file(path: Union[str, Path]) -> Program:
    """Читает файл программы (кодировка из настроек) и разбирает его."""
    path = Path(path)
    src = path.read_text(encoding=settings.source_encoding)
    try:
        return parse(src)
    except ParseError as e:
        logger.error("parser error in %s: %s", path, e)
        raise
