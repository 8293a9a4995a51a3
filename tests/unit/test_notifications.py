from __future__ import annotations

from drawsheet.logging.init import setup_logging
from drawsheet.services.notifications import Notification, NotificationKind, NotificationRegistry


def test_subscribe_notify_in_order():
    registry = NotificationRegistry()
    seen: list[tuple[str, str]] = []
    registry.subscribe(lambda n: seen.append(("first", n.title)))
    registry.subscribe(lambda n: seen.append(("second", n.title)))
    registry.notify(Notification(NotificationKind.SUCCESS, "Imported"))
    assert seen == [("first", "Imported"), ("second", "Imported")]
    assert len(registry) == 2


def test_unsubscribe_callable_removes_listener():
    registry = NotificationRegistry()
    seen: list[Notification] = []
    unsubscribe = registry.subscribe(seen.append)
    unsubscribe()
    registry.notify(Notification(NotificationKind.INFO, "ignored"))
    assert seen == []
    assert len(registry) == 0
    # Unsubscribing twice is harmless
    unsubscribe()


def test_unsubscribe_by_listener_and_clear():
    registry = NotificationRegistry()
    seen: list[Notification] = []

    def listener(n: Notification) -> None:
        seen.append(n)

    registry.subscribe(listener)
    registry.subscribe(print)
    registry.unsubscribe(listener)
    assert len(registry) == 1
    registry.notify(Notification(NotificationKind.INFO, "x"))
    assert seen == []
    registry.clear()
    assert len(registry) == 0


def test_failing_listener_does_not_block_others(capsys):
    setup_logging()
    registry = NotificationRegistry()
    seen: list[Notification] = []

    def broken(_: Notification) -> None:
        raise RuntimeError("boom")

    registry.subscribe(broken)
    registry.subscribe(seen.append)
    note = Notification(NotificationKind.ERROR, "budget.xlsx: import blocked", "No amount column mapped")
    registry.notify(note)
    assert seen == [note]
    assert "WARN notification listener failed: boom" in capsys.readouterr().out


def test_registries_are_independent():
    first = NotificationRegistry()
    second = NotificationRegistry()
    seen: list[Notification] = []
    first.subscribe(seen.append)
    second.notify(Notification(NotificationKind.WARNING, "other"))
    assert seen == []
