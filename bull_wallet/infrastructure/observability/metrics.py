"""Prometheus metrics for wallet operations, payouts and exchange-rate fetches"""

from prometheus_client import Counter, Histogram

# Wallet operation metrics
wallet_operation_counter = Counter(
    "bull_wallet_operation_total",
    "Wallet operations by type and outcome",
    ["operation", "outcome"],  # earn | convert_to_usd | convert_to_ghs | withdraw ; success | <error code>
)

bull_coins_earned_counter = Counter(
    "bull_wallet_bull_coins_earned_total",
    "Bull Coins credited from step milestones",
)

bull_coins_reclaimed_counter = Counter(
    "bull_wallet_bull_coins_reclaimed_total",
    "Bull Coins reclaimed after step counts went down",
)

# Payout gateway metrics
payout_latency_histogram = Histogram(
    "payout_latency_seconds",
    "MoMo payout gateway response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

payout_failure_counter = Counter(
    "payout_failures_total",
    "Failed payout gateway calls (including retried attempts)",
)

# Exchange rate metrics
rate_fetch_failures_counter = Counter(
    "exchange_rate_fetch_failures_total",
    "Failed USD to GHS rate fetches",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_operation(operation: str, outcome: str = "success") -> None:
    """Count a wallet operation outcome"""
    wallet_operation_counter.labels(operation=operation, outcome=outcome).inc()


def record_step_reward(reward: int) -> None:
    """Split milestone rewards into earned and reclaimed totals"""
    if reward > 0:
        bull_coins_earned_counter.inc(reward)
    elif reward < 0:
        bull_coins_reclaimed_counter.inc(-reward)
