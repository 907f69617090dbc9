# tests/test_resolution.py
from typing import Optional

import pytest

from lazy_ioc import Blueprint, BoxedCall, BoxedReference
from lazy_ioc.analysis import type_name
from lazy_ioc.exceptions import InvalidArgumentError, UnresolvedParameterError
from lazy_ioc.references import deferred
from lazy_ioc.resolution import load_type, normalize_arguments


class Engine:
    def __init__(self, label: str = "default"):
        self.label = label


class Car:
    def __init__(self, engine: Engine):
        self.engine = engine


class Dashboard:
    def __init__(self, speed):
        self.speed = speed


class MaybeEngine:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine


class StrictEngine:
    def __init__(self, engine: Engine):
        self.engine = engine


class NullableEngine:
    def __init__(self, engine: Optional[Engine]):
        self.engine = engine


class Trip:
    def __init__(self, car: Car, *, km: int):
        self.car = car
        self.km = km


def test_normalize_arguments_shapes():
    assert normalize_arguments(None) == {}
    assert normalize_arguments(["a", "b"]) == {0: "a", 1: "b"}
    assert normalize_arguments({Engine: 1, "x": 2, 3: 4}) == {type_name(Engine): 1, "x": 2, 3: 4}
    with pytest.raises(InvalidArgumentError):
        normalize_arguments("nope")
    with pytest.raises(InvalidArgumentError):
        normalize_arguments({1.5: "nope"})


def test_load_type_by_dotted_name():
    assert load_type("lazy_ioc.composite.Composite").__name__ == "Composite"
    assert load_type("dict") is dict
    with pytest.raises(InvalidArgumentError, match="unable to create component"):
        load_type("no.such.Type")
    with pytest.raises(InvalidArgumentError, match="not a class"):
        load_type("lazy_ioc.api.init")


@pytest.mark.parametrize("name", [".Composite", "lazy_ioc..Composite", "lazy_ioc.composite."])
def test_load_type_rejects_empty_name_segments(name):
    with pytest.raises(InvalidArgumentError, match="unable to create component"):
        load_type(name)


class TestPrecedence:
    def test_named_entry_beats_type_directed_component(self, blueprint: Blueprint):
        registered = Engine("registered")
        mapped = Engine("mapped")
        blueprint.bind_value(Engine, registered)
        c = blueprint.build()

        car = c.create(Car, {"engine": mapped})
        assert car.engine is mapped

    def test_name_beats_position(self, blueprint: Blueprint):
        c = blueprint.build()
        assert c.call(lambda a, b: (a, b), {0: "pos", "a": "named", 1: "b"}) == ("named", "b")

    def test_position_beats_type_entry(self, blueprint: Blueprint):
        c = blueprint.build()
        positional = Engine("positional")
        car = c.create(Car, {0: positional, Engine: Engine("by-type")})
        assert car.engine is positional

    def test_type_entry_beats_registered_component(self, blueprint: Blueprint):
        blueprint.bind_value(Engine, Engine("registered"))
        c = blueprint.build()
        car = c.create(Car, {Engine: Engine("by-type")})
        assert car.engine.label == "by-type"

    def test_type_directed_autowiring(self, blueprint: Blueprint):
        blueprint.bind_factory(Engine)
        c = blueprint.build()
        car = c.create(Car)
        assert car.engine is c.get(Engine)

    def test_type_beats_parameter_name(self, blueprint: Blueprint):
        blueprint.bind_value(Engine, Engine("typed"))
        blueprint.bind_value("engine", Engine("named"))
        c = blueprint.build()
        assert c.call(lambda engine: engine.label) == "named"
        assert c.call(lambda engine=None: engine.label) == "named"

        def typed(engine: Engine):
            return engine.label

        assert c.call(typed) == "typed"

    def test_default_used_when_nothing_matches(self, blueprint: Blueprint):
        c = blueprint.build()
        assert c.call(lambda x=5: x) == 5
        assert c.create(Engine).label == "default"


class TestOptionalAndNullable:
    def test_optional_default_none_resolves_to_none(self, blueprint: Blueprint):
        c = blueprint.build()
        assert c.create(MaybeEngine).engine is None

    def test_optional_prefers_registered_component(self, blueprint: Blueprint):
        blueprint.bind_factory(Engine)
        c = blueprint.build()
        assert isinstance(c.create(MaybeEngine).engine, Engine)

    def test_nullable_without_default_resolves_to_none(self, blueprint: Blueprint):
        c = blueprint.build()
        assert c.create(NullableEngine).engine is None

    def test_required_parameter_fails(self, blueprint: Blueprint):
        c = blueprint.build()
        with pytest.raises(UnresolvedParameterError) as exc:
            c.create(StrictEngine)
        assert exc.value.parameter == "engine"
        assert exc.value.type_name == type_name(Engine)
        assert "StrictEngine.__init__" in exc.value.location
        assert "test_resolution.py" in str(exc.value)

    def test_untyped_parameter_error_has_no_type(self, blueprint: Blueprint):
        c = blueprint.build()
        with pytest.raises(UnresolvedParameterError) as exc:
            c.call(lambda mystery: mystery)
        assert exc.value.type_name is None
        assert "(" not in str(exc.value).split(" in ")[0]


class TestUnsafeConstructorMode:
    def test_create_ignores_same_named_component(self, blueprint: Blueprint):
        blueprint.bind_value("speed", 120)
        c = blueprint.build()
        with pytest.raises(UnresolvedParameterError):
            c.create(Dashboard)

    def test_call_uses_same_named_component(self, blueprint: Blueprint):
        blueprint.bind_value("speed", 120)
        c = blueprint.build()
        assert c.call(Dashboard).speed == 120

    def test_create_accepts_explicit_entry(self, blueprint: Blueprint):
        blueprint.bind_value("speed", 120)
        c = blueprint.build()
        assert c.create(Dashboard, {"speed": BoxedReference("speed")}).speed == 120


class TestCreate:
    def test_create_by_dotted_name(self, blueprint: Blueprint):
        c = blueprint.build()
        composite = c.create("lazy_ioc.composite.Composite", {"registries": []})
        assert composite.has("anything") is False

    def test_create_unknown_type(self, blueprint: Blueprint):
        c = blueprint.build()
        with pytest.raises(InvalidArgumentError):
            c.create("no.such.Type")
        with pytest.raises(InvalidArgumentError):
            c.create(".Engine")

    def test_create_abstract_type(self, blueprint: Blueprint):
        from abc import ABC, abstractmethod

        class Shape(ABC):
            @abstractmethod
            def area(self):
                ...

        c = blueprint.build()
        with pytest.raises(InvalidArgumentError, match="abstract"):
            c.create(Shape)

    def test_keyword_only_arguments(self, blueprint: Blueprint):
        blueprint.bind_factory(Engine)
        blueprint.bind_factory(Car)
        c = blueprint.build()
        trip = c.create(Trip, {"km": 42})
        assert trip.km == 42
        assert trip.car is c.get(Car)


class TestBoxedValues:
    def test_reference_is_unboxed_late(self, blueprint: Blueprint):
        calls = []

        def make_engine():
            calls.append("engine")
            return Engine("late")

        blueprint.bind_factory(Car, {"engine": blueprint.ref("engine")})
        blueprint.bind_factory("engine", make_engine)
        c = blueprint.build()

        assert calls == []
        assert c.get(Car).engine.label == "late"
        assert calls == ["engine"]

    def test_boxed_call_produces_value(self, blueprint: Blueprint):
        blueprint.bind_value("base", 40)
        c = blueprint.build()
        total = c.call(lambda value: value, {"value": BoxedCall(lambda base, extra: base + extra, {"extra": 2})})
        assert total == 42

    def test_deferred_call_feeds_a_factory(self, blueprint: Blueprint):
        blueprint.bind_value("base", 41)
        blueprint.bind_factory("total", lambda value: value, {"value": blueprint.deferred(lambda base: base + 1)})
        c = blueprint.build()
        assert c.get("total") == 42

    def test_deferred_call_runs_once_per_activation(self, blueprint: Blueprint):
        calls = []

        def measure(label: str):
            calls.append(label)
            return Engine(label)

        blueprint.bind_value(str, "v8")
        blueprint.bind_factory(Car, {"engine": deferred(measure)})
        c = blueprint.build()

        assert calls == []
        assert c.get(Car).engine.label == "v8"
        assert c.get(Car) is c.get(Car)
        assert calls == ["v8"]

    def test_call_without_caching(self, blueprint: Blueprint):
        counter = {"n": 0}

        def count():
            counter["n"] += 1
            return counter["n"]

        c = blueprint.build()
        assert c.call(count) == 1
        assert c.call(count) == 2

    def test_call_rejects_non_callable(self, blueprint: Blueprint):
        c = blueprint.build()
        with pytest.raises(InvalidArgumentError):
            c.call(42)
