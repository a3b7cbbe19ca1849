"""Unit tests for the goal ladder"""

import pytest
from bull_wallet.domain.goals import build_goals, default_goals, derive_reward, goal_progress
from bull_wallet.domain.exceptions import InvalidGoals
from bull_wallet.domain.models import Goal


def test_default_ladder():
    goals = default_goals()

    assert [g.name for g in goals] == ["Bronze", "Silver", "Gold"]
    assert all(g.reward == derive_reward(g.steps) for g in goals)


def test_reward_derived_from_steps():
    assert derive_reward(2000) == 20
    assert derive_reward(7550) == 75
    assert derive_reward(99) == 0


def test_build_goals_ignores_supplied_reward():
    goals = build_goals([{"name": "Stroll", "steps": 3500, "reward": 999}])
    assert goals == [Goal(name="Stroll", steps=3500, reward=35)]


def test_build_goals_rejects_duplicate_names():
    with pytest.raises(InvalidGoals):
        build_goals([{"name": "Gold", "steps": 1000}, {"name": "Gold", "steps": 2000}])


@pytest.mark.parametrize(
    "raw",
    [
        {"name": "", "steps": 1000},
        {"name": "Neg", "steps": -1},
        {"name": "Missing"},
        {"name": "Float", "steps": 10.5},
    ],
)
def test_build_goals_rejects_invalid_entries(raw):
    with pytest.raises(InvalidGoals):
        build_goals([raw])


def test_goal_progress():
    progress = goal_progress(default_goals(), 5678)

    assert [p.completed for p in progress] == [True, True, False]
    assert progress[0].progress_pct == 100.0
    assert progress[2].progress_pct == 56.8
