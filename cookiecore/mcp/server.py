"""MCP server wrapping GameRuntime for interactive playtesting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcp.server.fastmcp import FastMCP

from cookiecore.definition import GameDefinition, resolve_icon
from cookiecore.persistence import Storage
from cookiecore.runtime import GameRuntime
from cookiecore.signals import Signal, SignalLog

# Maximum seconds per wait() call (24 hours)
_MAX_WAIT = 86400
# Maximum clicks per click() call
_MAX_CLICKS = 1000


@dataclass
class _GameHolder:
    """Holds the runtime and the signals it emitted since the last tool call."""

    runtime: GameRuntime
    log: SignalLog = field(default_factory=SignalLog)
    _since_autosave: float = 0.0

    @property
    def definition(self) -> GameDefinition:
        return self.runtime.definition


def _make_holder(definition: GameDefinition, storage: Storage | None = None) -> _GameHolder:
    log = SignalLog()
    runtime = GameRuntime(definition, storage=storage, on_signal=log)
    return _GameHolder(runtime=runtime, log=log)


def _signal_to_dict(signal: Signal) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "kind": signal.kind.name.lower(),
        "level": signal.level.name.lower(),
        "message": signal.message,
    }
    if signal.subject is not None:
        entry["subject"] = signal.subject
    return entry


def _drain(holder: _GameHolder, result: dict[str, Any]) -> dict[str, Any]:
    """Attach and clear the signals produced during this call."""
    if holder.log.signals:
        result["signals"] = [_signal_to_dict(s) for s in holder.log.signals]
        holder.log.clear()
    return result


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    defn = holder.definition
    return {
        "name": defn.config.name,
        "tick_rate": defn.config.tick_rate,
        "autosave_interval": defn.config.autosave_interval,
        "upgrades": [
            {"id": u.id, "name": u.name, "description": u.description}
            for u in defn.upgrades
        ],
        "achievements": [
            {"id": a.id, "name": a.name, "description": a.description}
            for a in defn.achievements
        ],
    }


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    state = holder.runtime.get_state()
    fallback = holder.definition.config.default_achievement_icon
    return _drain(holder, {
        "cookies": round(state.cookies, 2),
        "total_cookies": round(state.total_cookies, 2),
        "cookies_per_click": state.cookies_per_click,
        "cookies_per_second": state.cookies_per_second,
        "owned": {u.id: u.owned for u in state.upgrades},
        "achievements": [
            {
                "id": a.id,
                "name": a.name if a.unlocked else "???",
                "icon": resolve_icon(a.icon, fallback),
                "unlocked": a.unlocked,
            }
            for a in state.achievements
        ],
        "unlocked_count": len(state.unlocked_ids()),
    })


def _tool_get_upgrades(holder: _GameHolder) -> dict[str, Any]:
    runtime = holder.runtime
    fallback = holder.definition.config.default_icon
    result = []
    for u in runtime.visible_upgrades():
        time_to_afford = runtime.compute_time_to_afford(u.id)
        entry: dict[str, Any] = {
            "id": u.id,
            "name": u.name,
            "description": u.description,
            "icon": resolve_icon(u.icon, fallback),
            "cost": u.cost,
            "owned": u.owned,
            "cookies_per_click": u.cookies_per_click,
            "cookies_per_second": u.cookies_per_second,
            "affordable": runtime.can_afford(u.id),
        }
        if u.max_owned is not None:
            entry["max_owned"] = u.max_owned
        if time_to_afford is not None:
            entry["time_to_afford"] = round(time_to_afford, 2)
        else:
            entry["time_to_afford"] = None
        result.append(entry)
    return {"upgrades": result}


def _tool_buy(holder: _GameHolder, upgrade_id: str) -> dict[str, Any]:
    if holder.runtime.get_state().get_upgrade(upgrade_id) is None:
        return {"error": f"Unknown upgrade: {upgrade_id!r}"}

    result = holder.runtime.buy(upgrade_id)
    if result.success:
        return _drain(holder, {
            "success": True,
            "upgrade_id": result.upgrade_id,
            "cost_paid": result.cost_paid,
            "new_cost": result.new_cost,
            "owned": result.owned,
        })
    return _drain(holder, {"success": False, "reason": result.reason})


def _tool_click(holder: _GameHolder, count: int = 1) -> dict[str, Any]:
    if count < 1:
        return {"error": "Count must be at least 1"}
    if count > _MAX_CLICKS:
        return {"error": f"Count cannot exceed {_MAX_CLICKS}"}

    total = 0.0
    for _ in range(count):
        total += holder.runtime.click()
    return _drain(holder, {
        "clicks": count,
        "total_earned": round(total, 2),
        "new_balance": round(holder.runtime.get_state().cookies, 2),
    })


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} seconds (24h) per call"}

    config = holder.definition.config
    step = 1.0 / config.tick_rate
    earned = 0.0
    saves = 0

    # Subdivide into passive ticks, autosaving on the configured interval
    remaining = seconds
    while remaining > 0:
        dt = min(step, remaining)
        earned += holder.runtime.tick(dt)
        remaining -= dt
        holder._since_autosave += dt
        if holder._since_autosave >= config.autosave_interval:
            holder._since_autosave -= config.autosave_interval
            holder.runtime.save()
            saves += 1

    state = holder.runtime.get_state()
    return _drain(holder, {
        "waited": seconds,
        "earned": round(earned, 2),
        "cookies": round(state.cookies, 2),
        "cookies_per_second": state.cookies_per_second,
        "autosaves": saves,
    })


def _tool_save(holder: _GameHolder) -> dict[str, Any]:
    blob = holder.runtime.save()
    return _drain(holder, {"success": blob is not None})


def _tool_reset(holder: _GameHolder) -> dict[str, Any]:
    holder.runtime.reset()
    holder._since_autosave = 0.0
    return _drain(holder, {"success": True, "message": "Game reset to initial state"})


# ── Server factory ──────────────────────────────────────────────────


def create_server(
    definition: GameDefinition,
    storage: Storage | None = None,
) -> FastMCP:
    """Create an MCP server wrapping a GameRuntime for the given definition."""
    holder = _make_holder(definition, storage)

    mcp = FastMCP(
        name=f"cookiecore: {definition.config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static game overview: upgrade and achievement catalogs, tick rate."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get current counters, owned upgrades and achievement progress."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def get_upgrades() -> dict[str, Any]:
        """Get visible upgrades with cost, affordability and time-to-afford."""
        return _tool_get_upgrades(holder)

    @mcp.tool()
    def buy(upgrade_id: str) -> dict[str, Any]:
        """Buy one unit of an upgrade. Returns success/failure with reason."""
        return _tool_buy(holder, upgrade_id)

    @mcp.tool()
    def click(count: int = 1) -> dict[str, Any]:
        """Click the cookie N times (max 1000). Returns total earned."""
        return _tool_click(holder, count)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance passive income by the given seconds (max 86400), autosaving on the way."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def save() -> dict[str, Any]:
        """Save the game now."""
        return _tool_save(holder)

    @mcp.tool()
    def reset() -> dict[str, Any]:
        """Reset the game to initial state and delete the save."""
        return _tool_reset(holder)

    return mcp
