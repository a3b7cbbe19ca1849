"""Step milestone reward engine"""

from bull_wallet.domain.exceptions import InvalidAmount

STEPS_PER_MILESTONE = 1000
DEFAULT_COINS_PER_THOUSAND = 10


def compute_milestone_reward(
    previous_steps: int,
    new_steps: int,
    coins_per_thousand: int = DEFAULT_COINS_PER_THOUSAND,
) -> int:
    """
    Bull Coins earned by moving from previous_steps to new_steps.

    Rewards accrue per completed multiple of 1000 cumulative steps, so the
    result depends only on the two counts and not on how the steps arrived:

        500  -> 1999: 1 milestone crossed  -> 10 BC
        999  -> 3000: 3 milestones crossed -> 30 BC
        3000 -> 1000: 2 milestones undone  -> -20 BC (reclaim)

    Crediting floor((new - previous) / 1000) from the raw step difference
    would give 20 BC for 999 -> 3000, and its total would change with how
    the same steps were split across updates (999 -> 1500 -> 3000 gives 10).

    Raises:
        InvalidAmount: If either step count is negative
    """
    if previous_steps < 0 or new_steps < 0:
        raise InvalidAmount("Step counts must be non-negative")

    crossed = new_steps // STEPS_PER_MILESTONE - previous_steps // STEPS_PER_MILESTONE
    return crossed * coins_per_thousand


def describe_milestone(previous_steps: int, new_steps: int) -> str:
    """Ledger description naming the milestone span, e.g. 'Walked 2000 steps'"""
    crossed = new_steps // STEPS_PER_MILESTONE - previous_steps // STEPS_PER_MILESTONE
    if crossed >= 0:
        return f"Walked {crossed * STEPS_PER_MILESTONE} steps"
    return f"Reclaimed {-crossed * STEPS_PER_MILESTONE} steps"
