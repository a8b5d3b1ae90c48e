"""The default cookie game: six upgrades and eight achievements."""
from __future__ import annotations

from cookiecore.achievement import Achievement
from cookiecore.cost_scaling import CostScaling
from cookiecore.definition import GameConfig, GameDefinition
from cookiecore.requirement import Req
from cookiecore.upgrade import Upgrade


def define_game() -> GameDefinition:
    return GameDefinition(
        config=GameConfig(
            name="Cookie Clicker",
            tick_rate=10,
            autosave_interval=10.0,
            storage_key="cookie-clicker-game-state",
        ),
        upgrades=[
            Upgrade(
                id="cursor",
                name="Better Cursor",
                description="Double your clicking power!",
                cost=15,
                cookies_per_click=1,
                icon="MousePointerClick",
                cost_scaling=CostScaling.exponential(1.15),
            ),
            Upgrade(
                id="grandma",
                name="Grandma",
                description="A nice grandma to bake cookies for you.",
                cost=100,
                cookies_per_second=1,
                icon="UserRoundCog",
                unlock_threshold=50,
                cost_scaling=CostScaling.exponential(1.15),
            ),
            Upgrade(
                id="farm",
                name="Cookie Farm",
                description="Grow cookie plants from cookie seeds.",
                cost=500,
                cookies_per_second=5,
                icon="Sprout",
                unlock_threshold=200,
                cost_scaling=CostScaling.exponential(1.15),
            ),
            Upgrade(
                id="mine",
                name="Cookie Mine",
                description="Mine cookie ores from the depths of the earth.",
                cost=2000,
                cookies_per_second=20,
                icon="Pickaxe",
                unlock_threshold=1000,
                cost_scaling=CostScaling.exponential(1.15),
            ),
            Upgrade(
                id="factory",
                name="Cookie Factory",
                description="Mass produce cookies with giant industrial ovens.",
                cost=10000,
                cookies_per_second=100,
                icon="Factory",
                unlock_threshold=5000,
                cost_scaling=CostScaling.exponential(1.15),
            ),
            Upgrade(
                id="bank",
                name="Cookie Bank",
                description="Generate cookies from interest rates.",
                cost=50000,
                cookies_per_second=500,
                icon="Landmark",
                unlock_threshold=25000,
                cost_scaling=CostScaling.exponential(1.15),
            ),
        ],
        achievements=[
            Achievement(
                id="first-cookie",
                name="First Cookie",
                description="Click your first cookie",
                icon="Cookie",
                condition=Req.total_cookies(">=", 1),
            ),
            Achievement(
                id="cookie-amateur",
                name="Cookie Amateur",
                description="Bake 100 cookies in total",
                icon="Oven",
                condition=Req.total_cookies(">=", 100),
            ),
            Achievement(
                id="cookie-enthusiast",
                name="Cookie Enthusiast",
                description="Bake 1,000 cookies in total",
                icon="ChefHat",
                condition=Req.total_cookies(">=", 1_000),
            ),
            Achievement(
                id="cookie-factory",
                name="Cookie Factory",
                description="Bake 10,000 cookies in total",
                icon="Factory",
                condition=Req.total_cookies(">=", 10_000),
            ),
            Achievement(
                id="cookie-empire",
                name="Cookie Empire",
                description="Bake 100,000 cookies in total",
                icon="Building",
                condition=Req.total_cookies(">=", 100_000),
            ),
            Achievement(
                id="first-grandma",
                name="Grandma's Helper",
                description="Hire your first grandma",
                icon="UserRoundCog",
                condition=Req.owns("grandma"),
            ),
            Achievement(
                id="farm-acquired",
                name="Green Thumb",
                description="Buy your first cookie farm",
                icon="Sprout",
                condition=Req.owns("farm"),
            ),
            Achievement(
                id="click-machine",
                name="Click Machine",
                description="Have 10 cookies per click",
                icon="MousePointerClick",
                condition=Req.per_click(">=", 10),
            ),
        ],
    )
