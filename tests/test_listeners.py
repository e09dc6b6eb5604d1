"""Tests for listener module."""

import pytest
import threading

from src.dirwatch.exceptions import InvalidArgumentError
from src.dirwatch.listeners import DirListener, ListenerRegistry


class NullListener(DirListener):
    """Listener that ignores every callback."""

    def on_create(self, event):
        pass

    def on_modify(self, event):
        pass

    def on_delete(self, event, is_directory):
        pass

    def on_overflow(self, event):
        pass


class EqualListener(NullListener):
    """Listener whose instances all compare equal."""

    def __eq__(self, other):
        return isinstance(other, EqualListener)

    def __hash__(self):
        return 0


class TestDirListener:
    """Tests for the DirListener interface."""

    def test_cannot_instantiate_interface(self):
        with pytest.raises(TypeError):
            DirListener()

    def test_partial_implementation_rejected(self):
        class CreateOnly(DirListener):
            def on_create(self, event):
                pass

        with pytest.raises(TypeError):
            CreateOnly()

    def test_full_implementation(self):
        assert isinstance(NullListener(), DirListener)


class TestListenerRegistry:
    """Tests for ListenerRegistry class."""

    def test_create_empty_registry(self):
        registry = ListenerRegistry()
        assert len(registry) == 0
        assert registry.snapshot() == ()

    def test_add_listener(self):
        registry = ListenerRegistry()
        listener = NullListener()

        assert registry.add(listener) is True
        assert listener in registry
        assert len(registry) == 1

    def test_add_duplicate_listener(self):
        registry = ListenerRegistry()
        listener = NullListener()
        registry.add(listener)

        assert registry.add(listener) is False
        assert len(registry) == 1

    def test_equal_listeners_kept_separately(self):
        registry = ListenerRegistry()
        first = EqualListener()
        second = EqualListener()

        registry.add(first)
        registry.add(second)
        registry.remove(second)

        assert registry.snapshot() == (first,)
        assert registry.snapshot()[0] is first

    def test_add_none_raises(self):
        registry = ListenerRegistry()

        with pytest.raises(InvalidArgumentError):
            registry.add(None)

    def test_remove_listener(self):
        registry = ListenerRegistry()
        listener = NullListener()
        registry.add(listener)

        assert registry.remove(listener) is True
        assert listener not in registry

    def test_remove_unknown_listener(self):
        registry = ListenerRegistry()

        assert registry.remove(NullListener()) is False

    def test_remove_twice(self):
        registry = ListenerRegistry()
        listener = NullListener()
        registry.add(listener)
        registry.remove(listener)

        assert registry.remove(listener) is False

    def test_remove_none_raises(self):
        registry = ListenerRegistry()

        with pytest.raises(InvalidArgumentError):
            registry.remove(None)

    def test_snapshot_preserves_insertion_order(self):
        registry = ListenerRegistry()
        listeners = [NullListener() for _ in range(5)]
        for listener in listeners:
            registry.add(listener)

        registry.remove(listeners[2])

        assert registry.snapshot() == (listeners[0], listeners[1], listeners[3], listeners[4])

    def test_snapshot_not_affected_by_later_changes(self):
        registry = ListenerRegistry()
        listener = NullListener()
        registry.add(listener)

        snapshot = registry.snapshot()
        registry.remove(listener)

        assert snapshot == (listener,)

    def test_clear(self):
        registry = ListenerRegistry()
        registry.add(NullListener())
        registry.add(NullListener())

        assert registry.clear() == 2
        assert len(registry) == 0

    def test_concurrent_add(self):
        registry = ListenerRegistry()
        listeners = [NullListener() for _ in range(100)]

        def add_all():
            for listener in listeners:
                registry.add(listener)

        threads = [threading.Thread(target=add_all) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 100
