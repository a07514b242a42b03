"""Tests for the Registry facade."""

from unittest.mock import MagicMock

import pytest

from browser_actions.config_schema import RegistryConfig
from browser_actions.registry import (
    ActionCall,
    ActionDescriptor,
    ActionNotFound,
    DuplicateAction,
    FieldSpec,
    ParameterSchema,
    Registry,
    ValidationError,
)


URL_SCHEMA = ParameterSchema.of(FieldSpec("url"))


class TestRegister:
    """Test registration through the facade."""

    def test_returns_descriptor(self, registry: Registry) -> None:
        handler = MagicMock()
        descriptor = registry.register("go", "Go somewhere", handler, URL_SCHEMA, domains=["a.io"])
        assert isinstance(descriptor, ActionDescriptor)
        assert descriptor.domains == ("a.io",)
        assert registry.lookup("go") is descriptor
        assert "go" in registry
        assert registry.names == ["go"]

    @pytest.mark.asyncio
    async def test_excluded_action_unreachable(self) -> None:
        registry = Registry(exclude_actions=["go"])
        handler = MagicMock()
        assert registry.register("go", "Go", handler) is None
        assert len(registry) == 0
        with pytest.raises(ActionNotFound):
            registry.lookup("go")
        with pytest.raises(ActionNotFound):
            await registry.execute("go", {})
        handler.assert_not_called()
        assert "go:" not in registry.describe()

    def test_duplicate_raises(self, registry: Registry) -> None:
        registry.register("go", "Go", MagicMock())
        with pytest.raises(DuplicateAction):
            registry.register("go", "Go again", MagicMock())

    def test_overwrite(self, registry: Registry) -> None:
        registry.register("go", "Go", MagicMock())
        registry.register("go", "Go again", MagicMock(), overwrite=True)
        assert registry.lookup("go").description == "Go again"

    def test_lookup_unknown(self, registry: Registry) -> None:
        with pytest.raises(ActionNotFound):
            registry.lookup("nope")


class TestActionDecorator:
    """Test the decorator form."""

    @pytest.mark.asyncio
    async def test_function_name_used(self, registry: Registry) -> None:
        @registry.action("Say hello", ParameterSchema.of(FieldSpec("name")))
        async def greet(name: str) -> str:
            return f"hello {name}"

        assert registry.names == ["greet"]
        result = await registry.execute("greet", {"name": "Ada"})
        assert result.extracted_content == "hello Ada"

    def test_explicit_name_and_function_returned(self, registry: Registry) -> None:
        def impl() -> None:
            return None

        decorated = registry.action("Ping", name="ping")(impl)
        assert decorated is impl
        assert registry.lookup("ping").handler is impl


class TestAct:
    """Test executing a model's selection."""

    @pytest.mark.asyncio
    async def test_mapping_call(self, registry: Registry) -> None:
        handler = MagicMock(return_value="went")
        registry.register("go", "Go", handler, URL_SCHEMA)
        result = await registry.act({"go": {"url": "https://a.io"}})
        handler.assert_called_once_with(url="https://a.io")
        assert result.extracted_content == "went"

    @pytest.mark.asyncio
    async def test_unselected_entries_ignored(self, registry: Registry) -> None:
        handler = MagicMock(return_value=None)
        registry.register("go", "Go", handler, URL_SCHEMA)
        await registry.act({"wait": None, "go": {"url": "https://a.io"}})
        handler.assert_called_once()

    @pytest.mark.asyncio
    async def test_action_call_object(self, registry: Registry) -> None:
        registry.register("go", "Go", lambda url: url, URL_SCHEMA)
        result = await registry.act(ActionCall("go", {"url": "https://a.io"}))
        assert result.extracted_content == "https://a.io"

    @pytest.mark.asyncio
    async def test_more_than_one_selection_rejected(self, registry: Registry) -> None:
        with pytest.raises(ValidationError, match="Exactly one action"):
            await registry.act({"a": {}, "b": {}})

    @pytest.mark.asyncio
    async def test_empty_selection_rejected(self, registry: Registry) -> None:
        with pytest.raises(ValidationError):
            await registry.act({})

    def test_action_call_round_trip_shape(self) -> None:
        call = ActionCall.from_dict({"go": {"url": "x"}})
        assert call.to_dict() == {"go": {"url": "x"}}


class TestFromConfig:
    """Test building a registry from the config section."""

    @pytest.mark.asyncio
    async def test_settings_applied(self) -> None:
        config = RegistryConfig(
            exclude_actions=["save_pdf"],
            allow_overwrite=True,
            enforce_visibility=False,
            coerce_types=True,
            action_timeout_seconds=2.5,
        )
        registry = Registry.from_config(config, exclude_actions=["wait"])

        assert registry.register("save_pdf", "PDF", MagicMock()) is None
        assert registry.register("wait", "Wait", MagicMock()) is None
        assert registry.engine.timeout == 2.5
        assert registry.engine.enforce_visibility is False

        handler = MagicMock(return_value=None)
        registry.register("pick", "Pick", MagicMock(), ParameterSchema.of(FieldSpec("n", "integer")))
        registry.register("pick", "Pick", handler, ParameterSchema.of(FieldSpec("n", "integer")))
        await registry.execute("pick", {"n": "3"})
        handler.assert_called_once_with(n=3)
