"""Daily goal ladder: validation, reward derivation and progress"""

from typing import Any, Dict, Iterable, List

from bull_wallet.domain.exceptions import InvalidGoals
from bull_wallet.domain.models import Goal, GoalProgress

STEPS_PER_REWARD_COIN = 100


def derive_reward(steps: int) -> int:
    """Goal reward in Bull Coins: one coin per 100 target steps"""
    return steps // STEPS_PER_REWARD_COIN


def default_goals() -> List[Goal]:
    """Ladder assigned to every new profile"""
    return [
        Goal(name="Bronze", steps=2000, reward=20),
        Goal(name="Silver", steps=5000, reward=50),
        Goal(name="Gold", steps=10000, reward=100),
    ]


def build_goals(raw_goals: Iterable[Dict[str, Any]]) -> List[Goal]:
    """
    Validate a caller-supplied goal ladder and derive each reward.

    Any reward sent by the caller is ignored; reward = steps // 100 always.

    Raises:
        InvalidGoals: On blank names, duplicate names, or negative steps
    """
    goals = []
    seen = set()
    for raw in raw_goals:
        name = str(raw.get("name", "")).strip()
        steps = raw.get("steps")

        if not name:
            raise InvalidGoals("Goal name must not be empty")
        if name in seen:
            raise InvalidGoals(f"Duplicate goal name: {name}")
        if not isinstance(steps, int) or isinstance(steps, bool) or steps < 0:
            raise InvalidGoals(f"Goal {name} must have a non-negative integer step target")

        seen.add(name)
        goals.append(Goal(name=name, steps=steps, reward=derive_reward(steps)))

    return goals


def goals_to_json(goals: Iterable[Goal]) -> List[Dict[str, Any]]:
    return [{"name": g.name, "steps": g.steps, "reward": g.reward} for g in goals]


def goals_from_json(data) -> List[Goal]:
    return [Goal(name=g["name"], steps=g["steps"], reward=g["reward"]) for g in (data or [])]


def goal_progress(goals: Iterable[Goal], current_steps: int) -> List[GoalProgress]:
    """Completion state of each goal for today's step count"""
    progress = []
    for goal in goals:
        if goal.steps == 0:
            pct = 100.0
        else:
            pct = min(current_steps / goal.steps * 100, 100.0)
        progress.append(
            GoalProgress(goal=goal, completed=current_steps >= goal.steps, progress_pct=round(pct, 1))
        )
    return progress
