"""
robolang.ast – узлы AST языка управления роботом.

Три семейства узлов:
  * операторы – ``execute(ctx)``: Program, Block, Action, Loop, If, While, Assignment;
  * целые выражения – ``evaluate(ctx) -> int``: Number, Sensor, Variable, Expression;
  * условия – ``evaluate(ctx) -> bool``: Condition.

Каждый узел печатается через ``str()`` в компактную текстовую форму.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .errors import RobotArithmeticError, UnknownValueError
from .runtime import ExecutionContext, wrap_int32

# ранг больше этого значения заменяется на 0
RANK_LIMIT = 13


# ----------------------------------------------------------------------
#  Перечисления ключевых слов
# ----------------------------------------------------------------------
class ActionKind(Enum):
    MOVE = 'move'
    TURN_L = 'turnL'
    TURN_R = 'turnR'
    TAKE_FUEL = 'takeFuel'
    WAIT = 'wait'
    TURN_AROUND = 'turnAround'
    SHIELD_ON = 'shieldOn'
    SHIELD_OFF = 'shieldOff'


class SensorKind(Enum):
    FUEL_LEFT = 'fuelLeft'
    OPP_LR = 'oppLR'
    OPP_FB = 'oppFB'
    NUM_BARRELS = 'numBarrels'
    BARREL_LR = 'barrelLR'
    BARREL_FB = 'barrelFB'
    WALL_DIST = 'wallDist'


class Operator(Enum):
    ADD = 'add'
    SUB = 'sub'
    MUL = 'mul'
    DIV = 'div'


class Relop(Enum):
    LT = 'lt'
    GT = 'gt'
    EQ = 'eq'


class Combinator(Enum):
    AND = 'and'
    OR = 'or'
    NOT = 'not'


# действия, принимающие число повторений
COUNTED_ACTIONS = (ActionKind.MOVE, ActionKind.WAIT)
# датчики, принимающие ранг
RANKED_SENSORS = (SensorKind.BARREL_LR, SensorKind.BARREL_FB)


# ----------------------------------------------------------------------
#  Целые выражения
# ----------------------------------------------------------------------
@dataclass
class Number:
    value: int

    def evaluate(self, ctx: ExecutionContext) -> int:
        return self.value

    def __str__(self):
        return str(self.value)


@dataclass
class Variable:
    name: str

    def evaluate(self, ctx: ExecutionContext) -> int:
        # первое чтение заводит переменную со значением 0
        return ctx.variables[self.name]

    def __str__(self):
        return self.name


@dataclass
class Sensor:
    kind: SensorKind
    rank: Optional[Expression] = None

    def evaluate(self, ctx: ExecutionContext) -> int:
        rank = self.rank.evaluate(ctx) if self.rank is not None else 0
        if rank > RANK_LIMIT:
            rank = 0
        robot = ctx.robot
        if self.kind is SensorKind.OPP_FB:
            return robot.getOpponentFB()
        if self.kind is SensorKind.OPP_LR:
            return robot.getOpponentLR()
        if self.kind is SensorKind.BARREL_FB:
            return robot.getBarrelFB(rank)
        if self.kind is SensorKind.BARREL_LR:
            return robot.getBarrelLR(rank)
        if self.kind is SensorKind.FUEL_LEFT:
            return robot.getFuel()
        if self.kind is SensorKind.WALL_DIST:
            return robot.getDistanceToWall()
        if self.kind is SensorKind.NUM_BARRELS:
            return robot.numBarrels()
        raise UnknownValueError(f"Unknown sensor {self.kind!r}")

    def __str__(self):
        if self.rank is not None:
            return f"{self.kind.value}({self.rank})"
        return self.kind.value


@dataclass
class Expression:
    """Либо ``op(a, b)``, либо обёртка ровно над одним операндом."""
    args: List[IntNode]
    op: Optional[Operator] = None

    def evaluate(self, ctx: ExecutionContext) -> int:
        if self.op is None:
            return self.args[0].evaluate(ctx)
        lval = self.args[0].evaluate(ctx)
        rval = self.args[1].evaluate(ctx)
        if self.op is Operator.ADD:
            return wrap_int32(lval + rval)
        if self.op is Operator.SUB:
            return wrap_int32(lval - rval)
        if self.op is Operator.MUL:
            return wrap_int32(lval * rval)
        if self.op is Operator.DIV:
            if rval == 0:
                raise RobotArithmeticError(f"division by zero in {self}")
            # деление с отбрасыванием дробной части (к нулю)
            quot = abs(lval) // abs(rval)
            return wrap_int32(quot if (lval < 0) == (rval < 0) else -quot)
        raise UnknownValueError(f"Unknown arithmetic op {self.op!r}")

    def __str__(self):
        if self.op is not None:
            return f"{self.op.value}({self.args[0]},{self.args[1]})"
        return str(self.args[0])


# ----------------------------------------------------------------------
#  Условия
# ----------------------------------------------------------------------
@dataclass
class Condition:
    """``relop(a, b)`` над выражениями или ``and/or/not`` над условиями."""
    relop: Optional[Relop] = None
    exprs: List[Expression] = field(default_factory=list)
    combinator: Optional[Combinator] = None
    conds: List[Condition] = field(default_factory=list)

    def evaluate(self, ctx: ExecutionContext) -> bool:
        if self.relop is not None:
            # правый операнд вычисляется первым
            rval = self.exprs[1].evaluate(ctx)
            lval = self.exprs[0].evaluate(ctx)
            if self.relop is Relop.LT:
                return lval < rval
            if self.relop is Relop.GT:
                return lval > rval
            if self.relop is Relop.EQ:
                return lval == rval
            raise UnknownValueError(f"Unknown relop {self.relop!r}")

        if self.combinator is None:
            raise UnknownValueError("Condition has neither relop nor combinator")
        if self.combinator is Combinator.NOT:
            return not self.conds[0].evaluate(ctx)
        # оба операнда вычисляются всегда
        b1 = self.conds[0].evaluate(ctx)
        b2 = self.conds[1].evaluate(ctx)
        if self.combinator is Combinator.AND:
            return b1 and b2
        if self.combinator is Combinator.OR:
            return b1 or b2
        raise UnknownValueError(f"Unknown combinator {self.combinator!r}")

    def __str__(self):
        if self.relop is not None:
            return f"{self.relop.value}({self.exprs[0]},{self.exprs[1]})"
        if self.combinator is Combinator.NOT:
            return f"not({self.conds[0]})"
        return f"{self.combinator.value}({self.conds[0]},{self.conds[1]})"


# ----------------------------------------------------------------------
#  Программа и блок
# ----------------------------------------------------------------------
@dataclass
class Program:
    statements: List[Statement]

    def execute(self, ctx: ExecutionContext) -> None:
        for st in self.statements:
            ctx.checkpoint()
            st.execute(ctx)

    def __str__(self):
        return "(" + "".join(f" + {st}" for st in self.statements) + ")"


@dataclass
class Block:
    statements: List[Statement]

    def execute(self, ctx: ExecutionContext) -> None:
        for st in self.statements:
            ctx.checkpoint()
            st.execute(ctx)

    def __str__(self):
        return "{ " + " ".join(str(st) for st in self.statements) + " }"


# ----------------------------------------------------------------------
#  Действия робота
# ----------------------------------------------------------------------
@dataclass
class Action:
    kind: ActionKind
    count: Optional[Expression] = None

    def execute(self, ctx: ExecutionContext) -> None:
        iterations = self.count.evaluate(ctx) if self.count is not None else 1
        robot = ctx.robot
        if self.kind is ActionKind.MOVE:
            for _ in range(iterations):
                robot.move()
        elif self.kind is ActionKind.WAIT:
            for _ in range(iterations):
                robot.idleWait()
        elif self.kind is ActionKind.TURN_L:
            robot.turnLeft()
        elif self.kind is ActionKind.TURN_R:
            robot.turnRight()
        elif self.kind is ActionKind.TAKE_FUEL:
            robot.takeFuel()
        elif self.kind is ActionKind.TURN_AROUND:
            robot.turnAround()
        elif self.kind is ActionKind.SHIELD_ON:
            robot.setShield(True)
        elif self.kind is ActionKind.SHIELD_OFF:
            robot.setShield(False)
        else:
            raise UnknownValueError(f"Unknown action {self.kind!r}")

    def __str__(self):
        if self.count is not None:
            return f"{self.kind.value}({self.count})"
        return self.kind.value


# ----------------------------------------------------------------------
#  Присваивание
# ----------------------------------------------------------------------
@dataclass
class Assignment:
    target: Variable
    expr: Expression

    def execute(self, ctx: ExecutionContext) -> None:
        ctx.variables[self.target.name] = self.expr.evaluate(ctx)

    def __str__(self):
        return f"{self.target}={self.expr}"


# ----------------------------------------------------------------------
#  Loop / While / If
# ----------------------------------------------------------------------
@dataclass
class Loop:
    body: Block

    def execute(self, ctx: ExecutionContext) -> None:
        # без условия выхода: останавливает только отмена или сам робот
        while True:
            ctx.checkpoint()
            self.body.execute(ctx)

    def __str__(self):
        return f"loop{self.body}"


@dataclass
class While:
    cond: Condition
    body: Block

    def execute(self, ctx: ExecutionContext) -> None:
        while True:
            ctx.checkpoint()
            if not self.cond.evaluate(ctx):
                break
            self.body.execute(ctx)

    def __str__(self):
        return f"while({self.cond}){self.body}"


@dataclass
class If:
    cond: Condition
    body: Block
    elifs: List[If] = field(default_factory=list)
    else_body: Optional[Block] = None

    def execute(self, ctx: ExecutionContext) -> bool:
        """Возвращает True, если сработала основная ветка этого узла.

        Ветка else достижима только при отсутствии elif: если elif есть,
        но ни одно их условие не выполнилось, не исполняется ничего.
        """
        if self.cond.evaluate(ctx):
            self.body.execute(ctx)
            return True
        if self.elifs:
            for branch in self.elifs:
                if branch.execute(ctx):
                    break
        elif self.else_body is not None:
            self.else_body.execute(ctx)
        return False

    def __str__(self):
        text = f"if({self.cond}){self.body}"
        for branch in self.elifs:
            text += f" el{branch}"
        if self.else_body is not None:
            text += f" else {self.else_body}"
        return text


# ----------------------------------------------------------------------
#  Объединения типов узлов
# ----------------------------------------------------------------------
IntNode = Union[Number, Sensor, Variable, Expression]
Statement = Union[Action, Loop, If, While, Assignment]
