import threading

import pytest

from robolang import execute, parse
from robolang.ast import (
    Action, Condition, Expression, Number, Relop, Sensor,
)
from robolang.errors import (
    ExecutionCancelled, RobotArithmeticError, UnknownValueError,
)
from robolang.runtime import ExecutionContext, VariableStore, wrap_int32


def run(src, robot, **kwargs):
    return execute(parse(src), robot, **kwargs)


def value_of(expr, robot):
    ctx = run(f"$r = {expr};", robot)
    return ctx.variables['$r']


# --------------------- Действия ------------------------

def test_move_three_issues_three_single_steps(robot):
    run("move(3);", robot)
    assert robot.calls == [('move',)] * 3


def test_wait_default_and_counted(robot):
    run("wait; wait(2);", robot)
    assert robot.actions() == ['idleWait'] * 3


def test_non_positive_count_does_nothing(robot):
    run("move(0); move(-2); $n = 2; wait($n);", robot)
    assert robot.actions() == ['idleWait', 'idleWait']


def test_simple_actions(robot):
    run("turnL; turnR; takeFuel; turnAround; shieldOn; shieldOff;", robot)
    assert robot.calls == [
        ('turnLeft',), ('turnRight',), ('takeFuel',), ('turnAround',),
        ('setShield', True), ('setShield', False),
    ]


# --------------------- Выражения ------------------------

def test_add_assignment(robot):
    ctx = run("$x = add(2,3);", robot)
    assert ctx.variables['$x'] == 5


@pytest.mark.parametrize("expr,expected", [
    ("sub(2,5)", -3),
    ("mul(-4,6)", -24),
    ("div(7,2)", 3),
    ("div(-7,2)", -3),
    ("div(7,-2)", -3),
    ("div(-7,-2)", 3),
    ("add(mul(2,3),sub(10,div(9,3)))", 13),
])
def test_arithmetic(robot, expr, expected):
    assert value_of(expr, robot) == expected


def test_arithmetic_wraps_to_32_bits(robot):
    assert value_of("add(2147483647,1)", robot) == -2147483648
    assert value_of("mul(2147483647,2)", robot) == -2
    assert value_of("div(-2147483648,-1)", robot) == -2147483648
    assert wrap_int32(2 ** 32 + 5) == 5


def test_division_by_zero_aborts(robot):
    with pytest.raises(RobotArithmeticError) as ei:
        run("move; $x = div(4,0); move;", robot)
    assert isinstance(ei.value, ArithmeticError)
    assert robot.actions() == ['move']


def test_division_by_zero_variable(robot):
    with pytest.raises(RobotArithmeticError):
        run("$z = 0; $x = div(4,$z);", robot)


# --------------------- Переменные ------------------------

def test_unset_variable_reads_zero_and_is_inserted(robot):
    ctx = run("$y = $z;", robot)
    assert ctx.variables['$y'] == 0
    assert '$z' in ctx.variables
    assert ctx.variables['$z'] == 0


def test_variable_store_default_insert():
    store = VariableStore()
    assert '$z' not in store
    assert store['$z'] == 0
    assert '$z' in store
    assert store['$z'] == 0
    store['$z'] = 4
    assert store.as_dict() == {'$z': 4}
    assert len(store) == 1


def test_assignment_overwrites_and_survives_loops(robot):
    ctx = run("$i = 0; while(lt($i,3)){ $last = mul($i,10); $i = add($i,1); } $i = add($last,1);", robot)
    assert ctx.variables['$last'] == 20
    assert ctx.variables['$i'] == 21


def test_each_execution_gets_its_own_store(robot):
    prog = parse("$x = add($x,1);")
    assert execute(prog, robot).variables['$x'] == 1
    assert execute(prog, robot).variables['$x'] == 1


def test_shared_store_is_reused(robot):
    prog = parse("$x = add($x,1);")
    store = VariableStore({'$x': 10})
    execute(prog, robot, variables=store)
    execute(prog, robot, variables=store)
    assert store['$x'] == 12


# --------------------- Датчики ------------------------

@pytest.mark.parametrize("word,call", [
    ("fuelLeft", ('getFuel',)),
    ("oppLR", ('getOpponentLR',)),
    ("oppFB", ('getOpponentFB',)),
    ("numBarrels", ('numBarrels',)),
    ("wallDist", ('getDistanceToWall',)),
    ("barrelLR", ('getBarrelLR', 0)),
    ("barrelFB", ('getBarrelFB', 0)),
])
def test_sensor_dispatch(robot, word, call):
    value_of(word, robot)
    assert robot.calls == [call]


def test_sensor_values_are_returned(make_robot):
    robot = make_robot(fuel=42, wall=3, barrelLR=-2)
    assert value_of("add(fuelLeft,wallDist)", robot) == 45
    assert value_of("barrelLR(1)", robot) == -2


@pytest.mark.parametrize("rank,passed", [
    ("20", 0),
    ("14", 0),
    ("13", 13),
    ("add(1,2)", 3),
    ("-1", -1),
])
def test_barrel_rank_clamp(robot, rank, passed):
    value_of(f"barrelLR({rank})", robot)
    assert robot.calls[-1] == ('getBarrelLR', passed)


def test_rank_evaluated_before_query(make_robot):
    robot = make_robot(numBarrels=2)
    value_of("barrelFB(numBarrels)", robot)
    assert robot.calls == [('numBarrels',), ('getBarrelFB', 2)]


# --------------------- Условия ------------------------

def test_relop_evaluates_right_operand_first(robot):
    run("if(lt(oppFB,oppLR)){move;}", robot)
    assert robot.calls[:2] == [('getOpponentLR',), ('getOpponentFB',)]


def test_and_or_evaluate_both_operands(make_robot):
    robot = make_robot(fuel=100, wall=3)
    run("if(or(eq(fuelLeft,100),eq(wallDist,3))){move;}", robot)
    assert ('getDistanceToWall',) in robot.calls
    assert robot.actions() == ['move']

    robot = make_robot(fuel=1)
    run("if(and(eq(fuelLeft,100),eq(wallDist,0))){move;}", robot)
    assert ('getDistanceToWall',) in robot.calls
    assert robot.actions() == []


@pytest.mark.parametrize("cond,expected", [
    ("lt(1,2)", True),
    ("gt(1,2)", False),
    ("eq(-3,-3)", True),
    ("not(eq(1,1))", False),
    ("and(lt(1,2),gt(3,2))", True),
    ("or(lt(2,1),gt(2,3))", False),
    ("not(or(lt(2,1),not(gt(2,3))))", False),
])
def test_condition_values(robot, cond, expected):
    run(f"if({cond}){{move;}}", robot)
    assert (robot.actions() == ['move']) is expected


# --------------------- If / elif / else ------------------------

def test_if_else_takes_else(make_robot):
    robot = make_robot(fuel=5)
    run("if(gt(fuelLeft,10)){move;}else{wait;}", robot)
    assert robot.actions() == ['idleWait']


def test_if_takes_primary(make_robot):
    robot = make_robot(fuel=50)
    run("if(gt(fuelLeft,10)){move;}else{wait;}", robot)
    assert robot.actions() == ['move']


def test_else_is_unreachable_once_elif_exists(make_robot):
    robot = make_robot(fuel=99)
    run("if(eq(fuelLeft,1)){move;}elif(eq(fuelLeft,2)){turnL;}else{wait;}", robot)
    assert robot.actions() == []


def test_matching_elif(make_robot):
    robot = make_robot(fuel=2)
    run("if(eq(fuelLeft,1)){move;}elif(eq(fuelLeft,2)){turnL;}else{wait;}", robot)
    assert robot.actions() == ['turnLeft']


def test_first_matching_elif_only(make_robot):
    robot = make_robot(fuel=5)
    run("if(eq(fuelLeft,1)){move;}elif(gt(fuelLeft,1)){turnL;}elif(gt(fuelLeft,2)){turnR;}", robot)
    assert robot.actions() == ['turnLeft']


def test_elif_match_is_not_remembered_between_runs(robot):
    src = ("$i = 0; while(lt($i,2)){"
           " if(eq($i,5)){move;} elif(eq($i,0)){turnL;} elif(eq($i,1)){turnR;}"
           " $i = add($i,1); }")
    run(src, robot)
    assert robot.actions() == ['turnLeft', 'turnRight']


def test_if_returns_whether_primary_ran(robot):
    node = parse("if(eq(1,1)){move;}elif(eq(1,1)){wait;}").statements[0]
    assert node.execute(ExecutionContext(robot)) is True
    node = parse("if(eq(1,2)){move;}elif(eq(1,1)){wait;}").statements[0]
    assert node.execute(ExecutionContext(robot)) is False
    assert robot.actions() == ['move', 'idleWait']


# --------------------- Циклы и отмена ------------------------

def test_while_terminates(make_robot):
    robot = make_robot(fuel=3)
    run("$n = 0; while(gt(fuelLeft,$n)){ move; $n = add($n,1); }", robot)
    assert robot.actions() == ['move'] * 3


class StopAfter(Exception):
    pass


def test_loop_runs_until_robot_stops_it(make_robot):
    robot = make_robot()
    moves = []

    def move():
        moves.append(1)
        if len(moves) == 4:
            raise StopAfter()
    robot.move = move

    with pytest.raises(StopAfter):
        run("loop { move; }", robot)
    assert len(moves) == 4


def test_loop_cancelled_between_statements(robot):
    cancel = threading.Event()
    record_move = robot.move

    def move():
        record_move()
        if len(robot.calls) == 5:
            cancel.set()
    robot.move = move

    with pytest.raises(ExecutionCancelled):
        run("loop { move; turnL; }", robot, cancel=cancel)
    # отмена проверяется перед следующим оператором: turnL уже не выполняется
    assert robot.actions()[-1] == 'move'
    assert len(robot.calls) == 5


def test_cancelled_before_start(robot):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(ExecutionCancelled):
        run("move;", robot, cancel=cancel)
    assert robot.calls == []


def test_cancel_from_another_thread(robot):
    cancel = threading.Event()
    started = threading.Event()
    errors = []

    def turn():
        started.set()
    robot.turnLeft = turn

    def worker():
        try:
            run("loop { turnL; }", robot, cancel=cancel)
        except ExecutionCancelled as e:
            errors.append(e)

    t = threading.Thread(target=worker)
    t.start()
    assert started.wait(5)
    cancel.set()
    t.join(5)
    assert not t.is_alive()
    assert len(errors) == 1


# --------------------- Внутренние ошибки ------------------------

def test_unknown_operator(robot):
    expr = Expression([Expression([Number(1)]), Expression([Number(2)])], op='pow')
    with pytest.raises(UnknownValueError):
        expr.evaluate(ExecutionContext(robot))


def test_unknown_relop_and_combinator(robot):
    ctx = ExecutionContext(robot)
    one = Expression([Number(1)])
    with pytest.raises(UnknownValueError):
        Condition(relop='ne', exprs=[one, one]).evaluate(ctx)
    leaf = Condition(relop=Relop.EQ, exprs=[one, one])
    with pytest.raises(UnknownValueError):
        Condition(combinator='xor', conds=[leaf, leaf]).evaluate(ctx)


def test_unknown_action_and_sensor(robot):
    ctx = ExecutionContext(robot)
    with pytest.raises(UnknownValueError):
        Action('jump').execute(ctx)
    with pytest.raises(UnknownValueError):
        Sensor('radar').evaluate(ctx)


def test_condition_without_relop_or_combinator(robot):
    with pytest.raises(UnknownValueError):
        Condition().evaluate(ExecutionContext(robot))
