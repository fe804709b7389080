import pytest

from minigin.fsm import Condition, FiniteStateMachine, State
from minigin.logic import And, Combine, Nand, Negate, Nor, Not, Or


class Yes(Condition):
    def evaluate(self, blackboard):
        return True


class No(Condition):
    def evaluate(self, blackboard):
        return False


class Flag(Condition):
    def __init__(self, key, calls=None):
        self.key = key
        self.calls = calls

    def evaluate(self, blackboard):
        if self.calls is not None:
            self.calls.append(self.key)
        return bool(blackboard.get(self.key))


def test_and():
    assert And(Yes, Yes).evaluate({})
    assert not And(Yes, No).evaluate({})
    assert not And(No, No).evaluate({})


def test_or():
    assert Or(Yes, No).evaluate({})
    assert Or(Yes, Yes).evaluate({})
    assert not Or(No, No).evaluate({})


def test_nand():
    assert not Nand(Yes, Yes).evaluate({})
    assert Nand(Yes, No).evaluate({})
    assert Nand(No, No).evaluate({})


def test_nor():
    assert Nor(No, No).evaluate({})
    assert not Nor(Yes, No).evaluate({})
    assert not Nor(Yes, Yes).evaluate({})


def test_empty_combinations():
    assert And().evaluate({})
    assert not Or().evaluate({})
    assert not Nand().evaluate({})
    assert Nor().evaluate({})


def test_not_and_negate():
    assert Not(No).evaluate({})
    assert not Not(Yes).evaluate({})
    assert Negate(No).evaluate({})
    assert not Negate(Yes()).evaluate({})


def test_conditions_read_blackboard():
    condition = And(Flag("a"), Flag("b"))
    assert not condition.evaluate({"a": True})
    assert condition.evaluate({"a": True, "b": True})


def test_and_stops_at_first_failure():
    calls = []
    And(Flag("first", calls), Flag("second", calls)).evaluate({})
    assert calls == ["first"]


def test_or_stops_at_first_success():
    calls = []
    Or(Flag("first", calls), Flag("second", calls)).evaluate({"first": True})
    assert calls == ["first"]


def test_combine_keeps_order_and_instantiates_classes():
    yes = Yes()
    combined = And(yes, No)
    assert combined.conditions[0] is yes
    assert isinstance(combined.conditions[1], No)
    assert len(combined.conditions) == 2


def test_combine_rejects_non_conditions():
    with pytest.raises(TypeError):
        Combine(object())
    with pytest.raises(TypeError):
        Not(42)


def test_nested_logic():
    condition = Or(And(Yes, No), Not(No))
    assert condition.evaluate({})


def test_logic_conditions_drive_state_machine():
    board = {}
    machine = FiniteStateMachine(board)
    machine.create_state("idle", State)
    machine.create_state("attack", State)
    machine.add_transition("idle", "attack", And(Flag("seen"), Not(Flag("hurt"))))
    machine.start("idle")
    board["seen"] = True
    board["hurt"] = True
    machine.tick()
    assert machine.current_state_id == "idle"
    board["hurt"] = False
    machine.tick()
    assert machine.current_state_id == "attack"