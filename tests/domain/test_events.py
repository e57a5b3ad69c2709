from __future__ import annotations

from scrobbly.domain.events import ChangeNotifier


def test_listeners_run_in_order_and_can_unsubscribe() -> None:
    notifier = ChangeNotifier("example")
    seen: list[str] = []
    notifier.subscribe(lambda: seen.append("first"))
    unsubscribe = notifier.subscribe(lambda: seen.append("second"))

    notifier.notify()
    unsubscribe()
    unsubscribe()
    notifier.notify()

    assert seen == ["first", "second", "first"]
    assert len(notifier) == 1


def test_failing_listener_does_not_block_others() -> None:
    notifier = ChangeNotifier("example")
    seen: list[str] = []

    def broken() -> None:
        raise RuntimeError("listener bug")

    notifier.subscribe(broken)
    notifier.subscribe(lambda: seen.append("ok"))

    notifier.notify()

    assert seen == ["ok"]
