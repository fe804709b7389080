import pytest

from minigin.events import DelegateInfo, Dispatcher, MulticastDelegate, Observer, Subject


class Recorder(Observer):
    def __init__(self, name, log):
        self.name = name
        self.log = log

    def notify(self, event, value):
        self.log.append((self.name, event, value))


def test_broadcast_reaches_observer_with_value():
    log = []
    subject = Subject()
    subject.add_observer(Recorder("a", log))
    subject.broadcast("hit", 42)
    assert log == [("a", "hit", 42)]


def test_broadcast_default_value_is_false():
    log = []
    subject = Subject()
    subject.add_observer(Recorder("a", log))
    subject.broadcast("ping")
    assert log == [("a", "ping", False)]


def test_most_recent_observer_notified_first():
    log = []
    subject = Subject()
    for name in ("a", "b", "c"):
        subject.add_observer(Recorder(name, log))
    subject.broadcast("e", 1)
    assert [entry[0] for entry in log] == ["c", "b", "a"]


def test_broadcast_without_observers_leaves_nothing():
    subject = Subject()
    subject.broadcast("e", 1)
    assert len(subject) == 0


@pytest.mark.parametrize(
    "removed, expected",
    [
        ("a", ["c", "b"]),
        ("b", ["c", "a"]),
        ("c", ["b", "a"]),
    ],
)
def test_remove_observer(removed, expected):
    log = []
    subject = Subject()
    observers = {name: Recorder(name, log) for name in ("a", "b", "c")}
    for observer in observers.values():
        subject.add_observer(observer)
    subject.remove_observer(observers[removed])
    assert len(subject) == 2
    subject.broadcast("e", 0)
    assert log == [(name, "e", 0) for name in expected]


def test_remove_unknown_observer_raises():
    subject = Subject()
    subject.add_observer(Recorder("a", []))
    with pytest.raises(ValueError):
        subject.remove_observer(Recorder("b", []))


def test_observer_is_abstract():
    with pytest.raises(TypeError):
        Observer()


def test_multicast_bind_and_broadcast():
    dispatcher = Dispatcher()
    delegate = MulticastDelegate(dispatcher)
    calls = []
    delegate.bind(lambda x, y: calls.append((x, y)))
    dispatcher.broadcast(1, 2)
    assert calls == [(1, 2)]
    assert not delegate.empty()


def test_multicast_calls_in_bind_order():
    dispatcher = Dispatcher()
    delegate = MulticastDelegate(dispatcher)
    calls = []
    delegate.bind(lambda: calls.append("first"))
    delegate.bind(lambda: calls.append("second"))
    dispatcher.broadcast()
    assert calls == ["first", "second"]


def test_unbind_function():
    dispatcher = Dispatcher()
    delegate = MulticastDelegate(dispatcher)
    calls = []

    def handler():
        calls.append("handler")

    delegate.bind(handler)
    delegate.unbind(handler)
    dispatcher.broadcast()
    assert calls == []
    assert delegate.empty()


def test_unbind_binder_removes_only_its_delegates():
    dispatcher = Dispatcher()
    delegate = MulticastDelegate(dispatcher)
    calls = []

    class Listener:
        def __init__(self, name):
            self.name = name

        def on_event(self, value):
            calls.append((self.name, value))

    first, second = Listener("first"), Listener("second")
    delegate.bind(first.on_event, first)
    delegate.bind(second.on_event, second)
    delegate.unbind_binder(first)
    dispatcher.broadcast(7)
    assert calls == [("second", 7)]
    assert len(delegate) == 1


def test_bind_non_callable_raises():
    delegate = MulticastDelegate(Dispatcher())
    with pytest.raises(TypeError):
        delegate.bind(5)


def test_new_delegate_starts_empty():
    delegate = MulticastDelegate(Dispatcher())
    assert delegate.empty() is True


def test_dispatcher_uses_attached_pool():
    dispatcher = Dispatcher()
    calls = []
    pool = [DelegateInfo(delegate=lambda v: calls.append(v))]
    dispatcher.set_delegates_pool(pool)
    dispatcher.broadcast("x")
    assert calls == ["x"]