"""Tests for the target language registry."""

from __future__ import annotations

from collections.abc import Generator, Sequence
from typing import Any

import pytest

from headergen.emit import Outcome
from headergen.ir import Declaration, Function, Param, PathType
from headergen.langs import (
    Lang,
    get_default_lang,
    get_lang,
    get_lang_info,
    is_lang_available,
    list_langs,
    register_lang,
)
from headergen.langs.c import LangC


class MockLang:
    """A mock language for testing the registry."""

    def __init__(self, **kwargs: Any) -> None:
        self.kwargs = kwargs

    def emit(self, item: Declaration, module: Sequence[str]) -> Outcome:
        return Outcome.SKIPPED

    def finalise(self) -> dict[str, str]:
        return {}

    @property
    def name(self) -> str:
        return "mock"

    @property
    def format_description(self) -> str:
        return "Mock language for testing"


class MockLangWithDocstring:
    """Extract this first line as description.

    This second line should be ignored.
    """

    def emit(self, item: Declaration, module: Sequence[str]) -> Outcome:
        return Outcome.SKIPPED

    def finalise(self) -> dict[str, str]:
        return {}

    @property
    def name(self) -> str:
        return "with-doc"

    @property
    def format_description(self) -> str:
        return ""


@pytest.fixture()
def reset_lang_registry() -> Generator[None, None, None]:
    """Save and restore global language registry state around each test."""
    import headergen.langs as langs

    saved_registry = dict(langs._LANG_REGISTRY)
    saved_descriptions = dict(langs._LANG_DESCRIPTIONS)
    saved_default = langs._DEFAULT_LANG
    saved_loaded = langs._LANGS_LOADED

    langs._LANG_REGISTRY.clear()
    langs._LANG_DESCRIPTIONS.clear()
    langs._DEFAULT_LANG = None
    langs._LANGS_LOADED = True

    yield

    langs._LANG_REGISTRY.clear()
    langs._LANG_REGISTRY.update(saved_registry)
    langs._LANG_DESCRIPTIONS.clear()
    langs._LANG_DESCRIPTIONS.update(saved_descriptions)
    langs._DEFAULT_LANG = saved_default
    langs._LANGS_LOADED = saved_loaded


class TestLangRegistry:
    """Tests for the registry mechanism using mock languages."""

    @pytest.fixture(autouse=True)
    def _isolate_registry(self, reset_lang_registry: None) -> None:
        """Use the reset fixture for every mock-based test."""

    def test_register_and_get_lang(self) -> None:
        register_lang("mock", MockLang, is_default=True)
        assert isinstance(get_lang("mock"), MockLang)

    def test_first_registered_is_default(self) -> None:
        register_lang("first", MockLang)
        register_lang("second", MockLang)
        assert get_default_lang() == "first"

    def test_register_default(self) -> None:
        register_lang("first", MockLang)
        register_lang("second", MockLang, is_default=True)
        assert isinstance(get_lang(), MockLang)
        assert get_default_lang() == "second"

    def test_list_langs(self) -> None:
        register_lang("alpha", MockLang)
        register_lang("beta", MockLang)
        assert list_langs() == ["alpha", "beta"]

    def test_duplicate_registration_raises(self) -> None:
        register_lang("mock", MockLang)
        with pytest.raises(ValueError, match="Language already registered"):
            register_lang("mock", MockLang)

    def test_get_unknown_lang(self) -> None:
        register_lang("mock", MockLang)
        with pytest.raises(ValueError, match="Unknown language: 'rust'. Available: mock"):
            get_lang("rust")

    def test_no_langs(self) -> None:
        with pytest.raises(ValueError, match="No languages available"):
            get_default_lang()

    def test_is_lang_available(self) -> None:
        register_lang("mock", MockLang)
        assert is_lang_available("mock") is True
        assert is_lang_available("nonexistent") is False

    def test_get_lang_info(self) -> None:
        register_lang("mock", MockLang, description="A test language")
        assert get_lang_info() == [{"name": "mock", "description": "A test language", "is_default": True}]

    def test_description_from_docstring(self) -> None:
        register_lang("with-doc", MockLangWithDocstring)
        assert get_lang_info()[0]["description"] == "Extract this first line as description."

    def test_get_lang_passes_kwargs(self) -> None:
        register_lang("mock", MockLang)
        lang = get_lang("mock", lib_name="x", custom_code="y")
        assert isinstance(lang, MockLang)
        assert lang.kwargs == {"lib_name": "x", "custom_code": "y"}

    def test_mock_satisfies_protocol(self) -> None:
        assert isinstance(MockLang(), Lang)


class TestLangRegistryIntegration:
    """Tests against the real registry populated on first use."""

    def test_c_registered(self) -> None:
        assert "c" in list_langs()
        assert is_lang_available("c")

    def test_c_is_default(self) -> None:
        assert get_default_lang() == "c"

    def test_get_c_returns_instance(self) -> None:
        lang = get_lang("c")
        assert isinstance(lang, LangC)
        assert isinstance(lang, Lang)

    def test_instances_are_fresh(self) -> None:
        assert get_lang("c") is not get_lang("c")

    def test_c_info(self) -> None:
        entry = next(info for info in get_lang_info() if info["name"] == "c")
        assert entry == {"name": "c", "description": "C headers", "is_default": True}

    def test_roundtrip_c(self) -> None:
        f = Function(
            "add",
            [Param("a", PathType(["i32"])), Param("b", PathType(["i32"]))],
            PathType(["i32"]),
            abi="C",
            attrs=[],
        )
        lang = get_lang("c", lib_name="mylib")
        # Not #[no_mangle], so nothing is exported.
        assert lang.emit(f, ["ffi"]) is Outcome.SKIPPED
        assert sorted(lang.finalise()) == ["mylib.h"]
