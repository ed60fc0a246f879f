"""Prometheus metrics for engine computations"""

from prometheus_client import Counter, Histogram

computation_counter = Counter(
    "household_computations_total",
    "Engine computations performed",
    ["operation"],  # timeline | debt_simulation | scenario
)

computation_duration_histogram = Histogram(
    "household_computation_duration_seconds",
    "Engine computation latency",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0],
)

debt_simulation_counter = Counter(
    "household_debt_simulations_total",
    "Debt payoff simulations by strategy and outcome",
    ["strategy", "outcome"],  # outcome: debt_free | not_converged
)

inferred_months_counter = Counter(
    "household_inferred_months_total",
    "Months synthesized with zero card payment when extending a timeline",
)


def record_computation(operation: str, duration_seconds: float) -> None:
    computation_counter.labels(operation=operation).inc()
    computation_duration_histogram.labels(operation=operation).observe(duration_seconds)


def record_debt_simulation(strategy: str, months_to_debt_free) -> None:
    """Record a simulation; a None result means the budget never clears the debt"""
    outcome = "debt_free" if months_to_debt_free is not None else "not_converged"
    debt_simulation_counter.labels(strategy=strategy, outcome=outcome).inc()


def record_inferred_months(count: int) -> None:
    if count > 0:
        inferred_months_counter.inc(count)
