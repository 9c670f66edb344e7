"""Tests for the process-wide engine selection."""

import pytest

from cl_image_proc import (
    ConvertBackend,
    EngineUnavailable,
    PillowBackend,
    SipsBackend,
    available_engines,
    create_engine,
    detect_engine,
    get_engine,
    set_engine,
)
from cl_image_proc.engine import ENGINE_ENV_VAR

from .conftest import FakeBackend


@pytest.fixture
def no_tools(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(ConvertBackend, "is_available", classmethod(lambda cls: False))
    monkeypatch.setattr(SipsBackend, "is_available", classmethod(lambda cls: False))


def test_foreign_engine_assignment_sticks(fake_backend: FakeBackend):
    set_engine(fake_backend)
    assert get_engine() is fake_backend
    assert get_engine() is fake_backend

    set_engine(None)
    set_engine(fake_backend)
    assert get_engine() is fake_backend


def test_assignment_by_name():
    set_engine("pillow")
    assert isinstance(get_engine(), PillowBackend)


def test_unknown_engine_name():
    with pytest.raises(EngineUnavailable, match="Unknown image engine"):
        set_engine("rmagick")


def test_detection_prefers_imagemagick(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ConvertBackend, "is_available", classmethod(lambda cls: True))
    monkeypatch.setattr(SipsBackend, "is_available", classmethod(lambda cls: True))
    assert isinstance(detect_engine(), ConvertBackend)


def test_detection_falls_back_to_sips(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ConvertBackend, "is_available", classmethod(lambda cls: False))
    monkeypatch.setattr(SipsBackend, "is_available", classmethod(lambda cls: True))
    assert isinstance(detect_engine(), SipsBackend)


@pytest.mark.usefixtures("no_tools")
def test_detection_falls_back_to_pillow():
    assert isinstance(get_engine(), PillowBackend)


@pytest.mark.usefixtures("no_tools")
def test_detection_fails_loudly_without_any_backend(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(PillowBackend, "is_available", classmethod(lambda cls: False))
    with pytest.raises(EngineUnavailable, match="no image processing facilities"):
        _ = get_engine()


@pytest.mark.usefixtures("no_tools")
def test_environment_variable_selects_engine(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(ENGINE_ENV_VAR, "pillow")
    assert isinstance(get_engine(), PillowBackend)


@pytest.mark.usefixtures("no_tools")
def test_environment_variable_naming_unusable_engine(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(ENGINE_ENV_VAR, "sips")
    with pytest.raises(EngineUnavailable, match="not usable"):
        _ = get_engine()


def test_detected_engine_is_cached(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(ENGINE_ENV_VAR, "pillow")
    first = get_engine()

    # Changing the environment after first use has no effect until cleared
    monkeypatch.setenv(ENGINE_ENV_VAR, "unknown")
    assert get_engine() is first

    set_engine(None)
    with pytest.raises(EngineUnavailable):
        _ = get_engine()


def test_explicit_assignment_beats_environment(
    monkeypatch: pytest.MonkeyPatch, fake_backend: FakeBackend
):
    monkeypatch.setenv(ENGINE_ENV_VAR, "pillow")
    set_engine(fake_backend)
    assert get_engine() is fake_backend


def test_create_engine_passes_timeout(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(ConvertBackend, "is_available", classmethod(lambda cls: True))
    engine = create_engine("CONVERT", timeout=3)
    assert isinstance(engine, ConvertBackend)
    assert engine.timeout == 3


def test_create_engine_in_process_backend_has_no_timeout():
    engine = create_engine("pillow", timeout=3)
    assert isinstance(engine, PillowBackend)
    assert not hasattr(engine, "timeout")


@pytest.mark.usefixtures("no_tools")
def test_available_engines():
    assert available_engines() == ["pillow"]
