from checkoutsim.metrics import ExperimentResult, efficiency_score
from checkoutsim.policies import find_optimal_cashiers, result_for


def _res(c, util, wait, customers=100):
    return ExperimentResult(c, customers, wait, util, efficiency_score(util, wait))


def test_picks_the_only_count_inside_the_band():
    results = [_res(1, 0.95, 50.0), _res(2, 0.75, 5.0), _res(3, 0.55, 2.0)]
    assert find_optimal_cashiers(results) == 2


def test_no_results_returns_none():
    assert find_optimal_cashiers([]) is None


def test_shortest_wait_wins_inside_band_first_on_ties():
    results = [_res(2, 0.85, 3.0), _res(3, 0.70, 1.0), _res(4, 0.62, 1.0)]
    assert find_optimal_cashiers(results) == 3


def test_band_bounds_are_inclusive():
    results = [_res(1, 0.99, 40.0), _res(2, 0.60, 9.0), _res(3, 0.90, 8.0)]
    assert find_optimal_cashiers(results) == 3


def test_falls_back_to_best_efficiency_when_band_empty():
    results = [_res(1, 0.95, 50.0), _res(2, 0.30, 0.0), _res(3, 0.30, 0.0)]
    assert find_optimal_cashiers(results) == 2


def test_custom_band():
    results = [_res(1, 0.95, 50.0), _res(2, 0.75, 5.0)]
    assert find_optimal_cashiers(results, min_utilization=0.9, max_utilization=1.0) == 1


def test_result_for_lookup():
    results = [_res(1, 0.95, 50.0), _res(2, 0.75, 5.0)]
    assert result_for(results, 2).utilization == 0.75
    assert result_for(results, None) is None
    assert result_for(results, 7) is None
