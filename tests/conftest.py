"""Pytest fixtures for behaves tests."""

import logging
import os
import sys

import pytest

from behaves import Behaviors, reset_behaviors
from behaves.config import reset_config


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Keep config files, env vars, logging and the default instance per-test."""
    for key in list(os.environ):
        if key.startswith("BEHAVES_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("BEHAVES_EXIT_HOOK", "false")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "path", list(sys.path))
    reset_config()
    reset_behaviors()

    yield

    reset_behaviors()
    reset_config()
    package_logger = logging.getLogger("behaves")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def behaviors() -> Behaviors:
    """A fresh Behaviors instance that never touches atexit."""
    instance = Behaviors(exit_hook=False)
    yield instance
    instance.close()


@pytest.fixture
def animal(behaviors: Behaviors) -> type:
    """Provider requiring method_one, method_two and method_three (public)."""

    @behaviors.implements("method_three")
    @behaviors.implements("method_one", "method_two")
    class Animal:
        pass

    return Animal


@pytest.fixture
def interface(behaviors: Behaviors) -> type:
    """Provider requiring public ``foo`` and private ``bar``."""

    @behaviors.implements("bar", private=True)
    @behaviors.implements("foo")
    class Interface:
        pass

    return Interface


@pytest.fixture
def greeting_defaults():
    """Default block defining a public ``greet``."""

    def block(ctx):
        @ctx.define
        def greet(self):
            return "hello"

    return block
