"""Tests for the structured error system."""

from behaves import BehavesError, ConformanceError, ErrorCode, NoDeclarationError, Scope


class Dog:
    pass


class Animal:
    pass


class TestErrorCode:
    def test_categories(self):
        assert ErrorCode.NO_DECLARATION.category == "declaration"
        assert ErrorCode.NOT_CONFORMING.category == "conformance"
        assert ErrorCode.CONFIG_INVALID.category == "config"

    def test_only_config_errors_are_recoverable(self):
        assert not ErrorCode.NOT_CONFORMING.is_recoverable
        assert not ErrorCode.NO_DECLARATION.is_recoverable
        assert ErrorCode.CONFIG_INVALID.is_recoverable


class TestBehavesError:
    def test_str_includes_error_id(self):
        err = BehavesError(code=ErrorCode.NO_DECLARATION, context={"provider": "Animal"})
        assert str(err) == "[BH-1001] Expected `Animal` to define behaviors, but none found."

    def test_missing_context_falls_back_to_template(self):
        err = BehavesError(code=ErrorCode.CONFIG_INVALID)
        assert "{key}" in err.message

    def test_recovery_hints_are_formatted(self):
        err = BehavesError(code=ErrorCode.NO_DECLARATION, context={"provider": "Animal"})
        assert err.recovery_hints[0].startswith("Decorate `Animal`")

    def test_to_dict(self):
        err = BehavesError(code=ErrorCode.CONFIG_INVALID, context={"key": "exit_hook", "detail": "bad"})
        data = err.to_dict()
        assert data["error_id"] == "BH-5001"
        assert data["category"] == "config"
        assert data["recoverable"] is True
        assert data["context"]["key"] == "exit_hook"


class TestNoDeclarationError:
    def test_all_scopes(self):
        err = NoDeclarationError(Animal)
        assert err.context["scope"] == "all"
        assert isinstance(err, NotImplementedError)
        assert isinstance(err, BehavesError)


class TestConformanceError:
    def test_missing_only(self):
        err = ConformanceError(Dog, Animal, Scope.PUBLIC, ["a", "b"])
        assert err.code == ErrorCode.NOT_CONFORMING
        assert err.message == (
            "Expected `Dog` to behave like `Animal`, but the following public methods "
            "are unimplemented: `a`, `b`."
        )
        assert "wrong scope" not in str(err)

    def test_wrong_scope_section(self):
        err = ConformanceError(Dog, Animal, Scope.PRIVATE, ["a", "b"], ["b"])
        assert err.code == ErrorCode.WRONG_SCOPE
        first, second = err.message.splitlines()
        assert first.endswith("private methods are unimplemented: `a`, `b`.")
        assert second == "The following private methods appear to be defined, but in the wrong scope: `b`."

    def test_context_keeps_lists(self):
        err = ConformanceError(Dog, Animal, Scope.PUBLIC, ("a",), ("a",))
        assert err.to_dict()["context"]["unimplemented"] == ["a"]
        assert err.to_dict()["context"]["wrong_scope"] == ["a"]
