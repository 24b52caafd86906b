"""Tests for default-behavior injection."""

import pytest

from behaves import Behaviors, DefinitionContext, Scope
from behaves.introspection import directly_owned_operations


@pytest.fixture
def provider(behaviors: Behaviors, greeting_defaults) -> type:
    @behaviors.inject_behaviors(greeting_defaults)
    @behaviors.implements("method_one")
    class Animal:
        pass

    return Animal


class TestPublicDefaults:
    def test_conformer_gets_injected_behavior(self, behaviors: Behaviors, provider: type):
        @behaviors.behaves_like(provider)
        class Dog:
            def method_one(self):
                pass

        assert "greet" in vars(Dog)
        assert Dog().greet() == "hello"

    def test_conformer_definition_wins(self, behaviors: Behaviors, provider: type):
        @behaviors.behaves_like(provider)
        class Dog:
            def method_one(self):
                pass

            def greet(self):
                return "bonjour"

        assert Dog().greet() == "bonjour"

    def test_later_definition_wins(self, behaviors: Behaviors, provider: type):
        @behaviors.behaves_like(provider)
        class Dog:
            def method_one(self):
                pass

        Dog.greet = lambda self: "hola"
        assert Dog().greet() == "hola"

    def test_injected_default_satisfies_requirement(self, behaviors: Behaviors):
        def defaults(ctx):
            @ctx.define
            def method_one(self):
                return 1

        @behaviors.inject_behaviors(defaults)
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            pass

        assert behaviors.finalize() == []


class TestPrivateDefaults:
    def test_private_default(self, behaviors: Behaviors):
        def defaults(ctx):
            @ctx.define(private=True)
            def greet(self):
                return "hello"

        @behaviors.inject_behaviors(defaults)
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            def method_one(self):
                pass

        assert "greet" in directly_owned_operations(Dog, Scope.PRIVATE)
        assert "greet" not in directly_owned_operations(Dog, Scope.PUBLIC)
        assert Dog()._greet() == "hello"

    def test_underscore_name_is_private(self, behaviors: Behaviors):
        def defaults(ctx):
            @ctx.define
            def _greet(self):
                return "hello"

        @behaviors.inject_behaviors(defaults)
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            def method_one(self):
                pass

        assert Dog()._greet() == "hello"

    def test_private_conformer_definition_wins(self, behaviors: Behaviors):
        def defaults(ctx):
            @ctx.define(private=True)
            def greet(self):
                return "hello"

        @behaviors.inject_behaviors(defaults)
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            def method_one(self):
                pass

            def _greet(self):
                return "bonjour"

        assert Dog()._greet() == "bonjour"


class TestComposition:
    def test_include_copies_mixin_operations(self, behaviors: Behaviors):
        class Greeting:
            def greet(self):
                return "hello"

            def _whisper(self):
                return "psst"

        @behaviors.inject_behaviors(lambda ctx: ctx.include(Greeting))
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            def method_one(self):
                pass

        assert "greet" in vars(Dog)
        assert Dog().greet() == "hello"
        assert Dog()._whisper() == "psst"

    def test_extend_adds_class_level_methods(self, behaviors: Behaviors):
        class Greeting:
            def greet(cls):
                return f"hello from {cls.__name__}"

        @behaviors.inject_behaviors(lambda ctx: ctx.extend(Greeting))
        @behaviors.implements("method_one")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            def method_one(self):
                pass

        assert Dog.greet() == "hello from Dog"

    def test_include_keeps_mangled_private_helpers_working(self, behaviors: Behaviors):
        class Greeter:
            def greet(self):
                return self.__secret()

            def __secret(self):
                return "psst"

        @behaviors.inject_behaviors(lambda ctx: ctx.include(Greeter))
        @behaviors.implements("secret", private=True)
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            pass

        assert Dog().greet() == "psst"
        assert Dog()._secret() == "psst"
        assert behaviors.finalize(raise_errors=False) == []

    def test_extend_skips_dunder_methods(self, behaviors: Behaviors):
        class Factory:
            def __init__(self):
                self.x = 1

            def make(cls):
                return cls()

        @behaviors.inject_behaviors(lambda ctx: ctx.extend(Factory))
        @behaviors.implements("make")
        class Animal:
            pass

        @behaviors.behaves_like(Animal)
        class Dog:
            pass

        assert "__init__" not in vars(Dog)
        first, second = Dog.make(), Dog()
        assert isinstance(first, Dog)
        assert not hasattr(Dog, "x")
        assert not hasattr(second, "x")


class TestDefinitionContext:
    def test_define_with_explicit_name(self):
        class Dog:
            pass

        ctx = DefinitionContext(Dog)
        ctx.define(lambda self: "woof", name="bark")
        assert Dog().bark() == "woof"
        assert ctx.defined == ["bark"]

    def test_define_without_name_rejects_lambda(self):
        class Dog:
            pass

        from behaves import BehavesError

        with pytest.raises(BehavesError):
            DefinitionContext(Dog).define(lambda self: "woof")

    def test_preserve_existing_keeps_conformer_operations(self):
        class Dog:
            def bark(self):
                return "woof"

        ctx = DefinitionContext(Dog, preserve_existing=True)
        ctx.define(lambda self: "meow", name="bark")
        assert Dog().bark() == "woof"
        assert ctx.defined == []

    def test_exposes_conformer(self):
        class Dog:
            pass

        assert DefinitionContext(Dog).conformer is Dog


class TestInjectionIsolation:
    def test_each_conformer_gets_its_own_application(self, behaviors: Behaviors, provider: type):
        @behaviors.behaves_like(provider)
        class Dog:
            def method_one(self):
                pass

        @behaviors.behaves_like(provider)
        class Cat:
            def method_one(self):
                pass

            def greet(self):
                return "meow"

        assert Dog().greet() == "hello"
        assert Cat().greet() == "meow"
        assert "greet" in vars(Dog)

    def test_injecting_twice_gives_same_state(self, behaviors: Behaviors, provider: type):
        from behaves.injection import inject

        class Dog:
            def method_one(self):
                pass

        inject(behaviors.registry, provider, Dog)
        first = dict(vars(Dog))
        inject(behaviors.registry, provider, Dog)
        assert dict(vars(Dog)) == first

    def test_no_defaults_is_a_no_op(self, behaviors: Behaviors, animal: type):
        from behaves.injection import inject

        class Dog:
            pass

        assert inject(behaviors.registry, animal, Dog) is None
        assert "greet" not in vars(Dog)
