import copy

import pytest

from minigin.event_queue import EventQueue


def test_fifo_order():
    queue = EventQueue()
    for event in ("a", "b", "c"):
        queue.push(event)
    assert [queue.pop(), queue.pop(), queue.pop()] == ["a", "b", "c"]
    assert queue.empty()


def test_front_does_not_remove():
    queue = EventQueue()
    queue.push(1)
    queue.push(2)
    assert queue.front() == 1
    assert len(queue) == 2


def test_new_queue_is_empty():
    assert EventQueue().empty() is True


def test_pop_empty_raises():
    with pytest.raises(IndexError):
        EventQueue().pop()


def test_front_empty_raises():
    with pytest.raises(IndexError):
        EventQueue().front()


def test_is_queued_by_value():
    queue = EventQueue([("jump", 1), ("fire", 2)])
    assert queue.is_queued(("fire", 2))
    assert not queue.is_queued(("fire", 3))


def test_is_queued_by_predicate():
    queue = EventQueue([3, 8, 5])
    assert queue.is_queued(lambda e: e > 7)
    assert not queue.is_queued(lambda e: e < 0)


def test_clear():
    queue = EventQueue([1, 2, 3])
    queue.clear()
    assert queue.empty()
    assert list(queue) == []


def test_copy_is_independent():
    queue = EventQueue([1, 2])
    duplicate = copy.copy(queue)
    duplicate.push(3)
    assert list(queue) == [1, 2]
    assert list(duplicate) == [1, 2, 3]