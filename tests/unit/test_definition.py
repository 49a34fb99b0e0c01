"""Tests for bean definitions."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from sprig.definition import BeanDefinition
from sprig.scope import ScopeType


class Widget:
    pass


class TestBeanDefinition:
    """Test BeanDefinition state and caching."""

    def test_defaults(self):
        definition = BeanDefinition(Widget, "widget")

        assert definition.scope is ScopeType.SINGLETON
        assert definition.is_singleton
        assert not definition.lazy
        assert not definition.is_materialized

    def test_prototype_cannot_hold_an_instance(self):
        with pytest.raises(ValueError):
            BeanDefinition(Widget, "widget", scope=ScopeType.PROTOTYPE, instance=Widget())

    def test_get_or_create_caches(self):
        definition = BeanDefinition(Widget, "widget", lazy=True)
        calls = []

        def factory(cls):
            calls.append(cls)
            return cls()

        first = definition.get_or_create(factory)
        second = definition.get_or_create(factory)

        assert first is second
        assert calls == [Widget]
        assert definition.is_materialized

    def test_get_or_create_returns_existing_instance(self):
        existing = Widget()
        definition = BeanDefinition(Widget, "widget", instance=existing)

        assert definition.get_or_create(lambda cls: pytest.fail("must not construct")) is existing

    def test_get_or_create_rejects_prototypes(self):
        definition = BeanDefinition(Widget, "widget", scope=ScopeType.PROTOTYPE)

        with pytest.raises(ValueError):
            definition.get_or_create(lambda cls: cls())

    def test_failed_factory_leaves_cache_empty(self):
        definition = BeanDefinition(Widget, "widget", lazy=True)

        def failing(cls):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            definition.get_or_create(failing)

        assert not definition.is_materialized
        assert isinstance(definition.get_or_create(lambda cls: cls()), Widget)

    def test_concurrent_first_access_constructs_once(self):
        definition = BeanDefinition(Widget, "widget", lazy=True)
        calls = []
        calls_lock = threading.Lock()
        barrier = threading.Barrier(8)

        def slow_factory(cls):
            with calls_lock:
                calls.append(cls)
            time.sleep(0.05)
            return cls()

        def worker(_):
            barrier.wait()
            return definition.get_or_create(slow_factory)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(worker, range(8)))

        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_each_definition_has_its_own_lock(self):
        a = BeanDefinition(Widget, "a")
        b = BeanDefinition(Widget, "b")

        assert a._lock is not b._lock
