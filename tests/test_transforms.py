"""Tests for the TransformRegistry."""

import asyncio
from typing import Any, List

import pytest

from propforge import TransformRegistry
from propforge.transforms import identity


@pytest.fixture
def registry() -> TransformRegistry:
    """Registry with one sync and one async transform."""

    async def upper(value: str) -> str:
        return value.upper()

    return TransformRegistry(
        transforms={
            "upper": upper,
            "add": lambda value, amount: value + amount,
        }
    )


class TestRegistryState:
    """Tests for registry configuration."""

    def test_defaults(self) -> None:
        """Test the initial state of a new registry."""
        registry = TransformRegistry()
        assert registry.names() == []
        assert registry.default_transform is identity
        assert registry.fallback == ""

    def test_configure_replaces_mapping_wholesale(self, registry: TransformRegistry) -> None:
        """Test that configure drops previously registered names."""
        registry.configure({"lower": str.lower})
        assert registry.names() == ["lower"]

    def test_configure_keeps_default_and_fallback_when_omitted(self) -> None:
        """Test that omitted options keep their values."""
        registry = TransformRegistry(fallback="N/A")
        registry.configure({}, default_transform=str.upper)
        registry.configure({"x": str})
        assert registry.fallback == "N/A"
        assert registry.default_transform is str.upper

    def test_configure_accepts_none_fallback(self) -> None:
        """Test that None is a valid fallback."""
        registry = TransformRegistry()
        registry.configure({}, fallback=None)
        assert registry.fallback is None

    def test_get_config_is_a_snapshot(self, registry: TransformRegistry) -> None:
        """Test that the returned config does not alias the registry mapping."""
        config = registry.get_config()
        assert sorted(config.transforms) == ["add", "upper"]
        assert config.default_transform is identity
        assert config.fallback == ""

        config.transforms.clear()
        assert sorted(registry.names()) == ["add", "upper"]

    def test_register_and_unregister(self, registry: TransformRegistry) -> None:
        """Test single-entry helpers."""
        registry.register("trim", str.strip)
        assert "trim" in registry.names()
        registry.unregister("trim")
        registry.unregister("never-registered")
        assert "trim" not in registry.names()

    def test_lookup_unknown_falls_back_with_warning(
        self, registry: TransformRegistry, debug_console
    ) -> None:
        """Test that unknown names return the default transform and warn."""
        assert registry.lookup("nope") is identity
        output = debug_console.file.getvalue()
        assert "[template] warn: apply_transform → Unknown transform: nope" in output


class TestApply:
    """Tests for TransformRegistry.apply()."""

    @pytest.mark.asyncio
    async def test_apply_async_transform(self, registry: TransformRegistry) -> None:
        """Test that coroutine results are awaited."""
        assert await registry.apply("abc", "upper") == "ABC"

    @pytest.mark.asyncio
    async def test_apply_sync_transform_with_args(self, registry: TransformRegistry) -> None:
        """Test that extra args are passed after the value."""
        assert await registry.apply(3, "add", [4]) == 7

    @pytest.mark.asyncio
    async def test_apply_unknown_uses_default(self, registry: TransformRegistry) -> None:
        """Test that unknown names leave the value unchanged by default."""
        assert await registry.apply("v", "missing", ["ignored"]) == "v"

    @pytest.mark.asyncio
    async def test_apply_custom_default(self) -> None:
        """Test that a configured default transform is used for unknown names."""
        registry = TransformRegistry(default_transform=lambda value, *args: f"<{value}>")
        assert await registry.apply("v", "missing") == "<v>"

    @pytest.mark.asyncio
    async def test_apply_propagates_failure_unchanged(self) -> None:
        """Test that transform exceptions are not wrapped by the registry."""

        async def fail(value: Any) -> Any:
            raise KeyError("boom")

        registry = TransformRegistry({"fail": fail})
        with pytest.raises(KeyError, match="boom"):
            await registry.apply("v", "fail")

    @pytest.mark.asyncio
    async def test_lookup_happens_at_call_time(self) -> None:
        """Test that a configure during a suspended transform affects later stages."""
        registry = TransformRegistry()
        calls: List[str] = []
        gate = asyncio.Event()

        async def slow(value: Any) -> Any:
            calls.append("slow")
            await gate.wait()
            return value

        registry.configure({"slow": slow, "tag": lambda value: f"old:{value}"})

        async def pipeline() -> Any:
            value = await registry.apply("v", "slow")
            return await registry.apply(value, "tag")

        task = asyncio.ensure_future(pipeline())
        await asyncio.sleep(0)
        registry.configure({"tag": lambda value: f"new:{value}"})
        gate.set()

        assert await task == "new:v"
        assert calls == ["slow"]
