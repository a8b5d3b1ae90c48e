"""Tests for MCP server tool functions."""

import json

import pytest

from cookiecore.achievement import Achievement
from cookiecore.definition import GameConfig, GameDefinition
from cookiecore.persistence import MemoryStorage
from cookiecore.requirement import Req
from cookiecore.upgrade import Upgrade

from cookiecore.mcp.server import (
    _GameHolder,
    _make_holder,
    _tool_buy,
    _tool_click,
    _tool_get_game_info,
    _tool_get_game_state,
    _tool_get_upgrades,
    _tool_reset,
    _tool_save,
    _tool_wait,
    create_server,
)


def _make_test_definition() -> GameDefinition:
    """A small but complete game definition for testing."""
    return GameDefinition(
        config=GameConfig(name="Test Game", tick_rate=10, autosave_interval=5.0, storage_key="test"),
        upgrades=[
            Upgrade(
                "pointer",
                name="Pointer",
                description="More per click",
                cost=10,
                cookies_per_click=1,
                icon="MousePointerClick",
            ),
            Upgrade(
                "baker",
                name="Baker",
                description="Bakes on its own",
                cost=20,
                cookies_per_second=2,
                unlock_threshold=15,
            ),
            Upgrade(
                "trophy",
                name="Trophy",
                description="Only one",
                cost=5,
                cookies_per_click=1,
                max_owned=1,
            ),
        ],
        achievements=[
            Achievement("first", name="First", condition=Req.total_cookies(">=", 1)),
            Achievement("baker", name="Hired", icon="ChefHat", condition=Req.owns("baker")),
        ],
    )


def _holder(storage=None) -> _GameHolder:
    return _make_holder(_make_test_definition(), storage or MemoryStorage())


def _kinds(result):
    return [s["kind"] for s in result.get("signals", [])]


# ── get_game_info ────────────────────────────────────────────────────


class TestGetGameInfo:
    def test_returns_expected_structure(self):
        result = _tool_get_game_info(_holder())
        assert result["name"] == "Test Game"
        assert result["tick_rate"] == 10
        assert [u["id"] for u in result["upgrades"]] == ["pointer", "baker", "trophy"]
        assert [a["id"] for a in result["achievements"]] == ["first", "baker"]


# ── get_game_state ───────────────────────────────────────────────────


class TestGetGameState:
    def test_initial_values(self):
        result = _tool_get_game_state(_holder())
        assert result["cookies"] == 0
        assert result["total_cookies"] == 0
        assert result["cookies_per_click"] == 1
        assert result["cookies_per_second"] == 0
        assert result["owned"] == {"pointer": 0, "baker": 0, "trophy": 0}
        assert result["unlocked_count"] == 0
        assert "signals" not in result

    def test_locked_achievements_are_masked(self):
        result = _tool_get_game_state(_holder())
        first = result["achievements"][0]
        assert first["name"] == "???"
        assert first["icon"] == "Award"
        assert not first["unlocked"]

    def test_after_click(self):
        holder = _holder()
        _tool_click(holder, 3)
        result = _tool_get_game_state(holder)
        assert result["cookies"] == 3
        assert result["achievements"][0]["name"] == "First"
        assert result["unlocked_count"] == 1


# ── get_upgrades ─────────────────────────────────────────────────────


class TestGetUpgrades:
    def test_hides_locked_upgrades(self):
        result = _tool_get_upgrades(_holder())
        assert [u["id"] for u in result["upgrades"]] == ["pointer", "trophy"]

    def test_reveals_after_threshold(self):
        holder = _holder()
        holder.runtime.grant(15)
        result = _tool_get_upgrades(holder)
        assert [u["id"] for u in result["upgrades"]] == ["pointer", "baker", "trophy"]

    def test_entry_fields(self):
        holder = _holder()
        holder.runtime.grant(12)
        entries = {u["id"]: u for u in _tool_get_upgrades(holder)["upgrades"]}
        pointer = entries["pointer"]
        assert pointer["cost"] == 10
        assert pointer["affordable"] is True
        assert pointer["time_to_afford"] == 0.0
        assert pointer["icon"] == "MousePointerClick"
        assert "max_owned" not in pointer
        assert entries["trophy"]["max_owned"] == 1
        assert entries["trophy"]["icon"] == "Cookie"

    def test_time_to_afford_without_income(self):
        result = _tool_get_upgrades(_holder())
        assert result["upgrades"][0]["time_to_afford"] is None
        assert result["upgrades"][0]["affordable"] is False


# ── buy ──────────────────────────────────────────────────────────────


class TestBuy:
    def test_success(self):
        holder = _holder()
        holder.runtime.grant(10)
        holder.log.clear()
        result = _tool_buy(holder, "pointer")
        assert result["success"] is True
        assert result["cost_paid"] == 10
        assert result["new_cost"] == 12
        assert result["owned"] == 1
        assert _kinds(result) == ["purchased"]

    def test_cannot_afford(self):
        result = _tool_buy(_holder(), "pointer")
        assert result["success"] is False
        assert result["reason"] == "insufficient_funds"
        assert result["signals"][0]["level"] == "error"
        assert result["signals"][0]["subject"] == "pointer"

    def test_max_owned(self):
        holder = _holder()
        holder.runtime.grant(100)
        assert _tool_buy(holder, "trophy")["success"] is True
        result = _tool_buy(holder, "trophy")
        assert result["success"] is False
        assert result["reason"] == "max_owned"
        assert _kinds(result) == ["max_owned"]

    def test_unknown_upgrade(self):
        result = _tool_buy(_holder(), "nonexistent")
        assert "error" in result

    def test_reports_unlocks(self):
        holder = _holder()
        holder.runtime.grant(20)
        holder.log.clear()
        result = _tool_buy(holder, "baker")
        assert _kinds(result) == ["purchased", "achievement_unlocked"]


# ── click ────────────────────────────────────────────────────────────


class TestClick:
    def test_single(self):
        result = _tool_click(_holder())
        assert result["clicks"] == 1
        assert result["total_earned"] == 1
        assert result["new_balance"] == 1
        assert _kinds(result) == ["achievement_unlocked"]

    def test_uses_per_click_rate(self):
        holder = _holder()
        holder.runtime.grant(10)
        _tool_buy(holder, "pointer")
        result = _tool_click(holder, 5)
        assert result["total_earned"] == 10

    def test_count_limits(self):
        assert "error" in _tool_click(_holder(), 0)
        assert "error" in _tool_click(_holder(), 1001)


# ── wait ─────────────────────────────────────────────────────────────


class TestWait:
    def test_without_income(self):
        result = _tool_wait(_holder(), 2.0)
        assert result["earned"] == 0
        assert result["cookies"] == 0

    def test_accrues_passive_income(self):
        holder = _holder()
        holder.runtime.grant(20)
        _tool_buy(holder, "baker")
        result = _tool_wait(holder, 3.0)
        assert result["earned"] == pytest.approx(6.0)
        assert result["cookies"] == pytest.approx(6.0)

    def test_autosaves_on_interval(self):
        storage = MemoryStorage()
        holder = _holder(storage)
        holder.runtime.grant(20)
        _tool_buy(holder, "baker")
        result = _tool_wait(holder, 11.0)
        assert result["autosaves"] == 2
        assert "saved" in _kinds(result)
        saved = json.loads(storage.get("test"))
        assert saved["cookiesPerSecond"] == 2

    def test_limits(self):
        assert "error" in _tool_wait(_holder(), 0)
        assert "error" in _tool_wait(_holder(), 86401)


# ── save / reset ─────────────────────────────────────────────────────


class TestSaveAndReset:
    def test_save(self):
        storage = MemoryStorage()
        holder = _holder(storage)
        _tool_click(holder, 4)
        result = _tool_save(holder)
        assert result["success"] is True
        assert _kinds(result) == ["saved"]
        assert json.loads(storage.get("test"))["cookies"] == 4

    def test_reload_from_storage(self):
        storage = MemoryStorage()
        holder = _holder(storage)
        _tool_click(holder, 4)
        _tool_save(holder)
        again = _holder(storage)
        state = _tool_get_game_state(again)
        assert state["cookies"] == 4
        assert _kinds(state) == ["loaded"]

    def test_reset(self):
        storage = MemoryStorage()
        holder = _holder(storage)
        _tool_click(holder, 4)
        _tool_save(holder)
        result = _tool_reset(holder)
        assert result["success"] is True
        assert _kinds(result) == ["reset"]
        assert storage.get("test") is None
        assert _tool_get_game_state(holder)["cookies"] == 0


def test_create_server():
    server = create_server(_make_test_definition(), MemoryStorage())
    assert server.name == "cookiecore: Test Game"
