#!/usr/bin/env python3
"""
Tests for the chain configuration and the reference driver.
"""

import numpy as np
import pytest
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from graphmc.chain import run_chain, thermalization_check
from graphmc.config import ChainConfig
from graphmc.geometry import rect_graph, triangle_graph
from graphmc.models import IsingModel, Phi4Model
from graphmc.statistics import Accumulator


def small_config(**overrides):
    params = dict(seed=77, n_therm=10, n_traj=50, n_skip=5, n_wolff=2,
                  n_sw=1, n_metropolis=1)
    params.update(overrides)
    return ChainConfig(**params)


def test_config_from_yaml():
    text = "seed: 5\nn_therm: 20\nn_traj: 100\nn_skip: 4\nn_wolff: 3\n"
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "chain.yaml"
        path.write_text(text)
        config = ChainConfig.from_yaml(path)
    assert config.seed == 5
    assert config.n_wolff == 3
    assert config.n_iterations == 120
    assert ChainConfig.from_dict(config.to_dict()) == config


def test_config_validation():
    with pytest.raises(ValueError):
        ChainConfig.from_dict({'n_skip': 0})
    with pytest.raises(ValueError):
        ChainConfig.from_dict({'n_traj': -1})
    with pytest.raises(ValueError):
        ChainConfig.from_dict({'n_sweeps': 10})
    with pytest.raises(ValueError):
        ChainConfig(seed="abc").validate()


def test_measurement_schedule():
    config = small_config()
    model = IsingModel(rect_graph(4, 4), beta=0.3, rng=config.make_stream())
    result = run_chain(model, config)

    assert result['m'].n == 10
    assert result.cluster_size.n == 60
    assert result.sw_clusters.n == 60
    assert result.accept_metropolis.n == 60
    assert result.accept_overrelax.n == 0
    assert all(0.0 < c <= 1.0 for c in result.cluster_size.history)
    assert all(0.0 <= a <= 1.0 for a in result.accept_metropolis.history)
    assert all(abs(m) <= 1.0 for m in result['m'].history)


def test_chain_is_reproducible():
    graph = triangle_graph(4)
    config = small_config(n_overrelax=1)

    def run():
        model = Phi4Model(graph, msq=-1.0, lam=0.25, rng=config.make_stream(),
                          metropolis_z=0.5)
        result = run_chain(model, config)
        return result['action'].history, model.phi.copy()

    hist_a, phi_a = run()
    hist_b, phi_b = run()
    assert hist_a == hist_b
    assert np.array_equal(phi_a, phi_b)


def test_demon_recorded_with_overrelaxation():
    config = small_config(n_overrelax=2)
    model = Phi4Model(rect_graph(4, 4), msq=-1.0, lam=0.25, rng=config.make_stream(),
                      metropolis_z=0.5)
    result = run_chain(model, config)
    assert result.demon.n == result['m'].n == 10
    assert all(d >= 0.0 for d in result.demon.history)

    ising = IsingModel(rect_graph(4, 4), beta=0.3, rng=config.make_stream())
    assert run_chain(ising, small_config()).demon.n == 0


def test_custom_observables_and_derived_quantities():
    config = small_config(n_traj=200, n_skip=1, cold_start=True)
    model = IsingModel(rect_graph(4, 4), beta=0.6, rng=config.make_stream())
    observables = {
        'm': model.magnetization,
        'm2': lambda: model.magnetization() ** 2,
        'm4': lambda: model.magnetization() ** 4,
        'm_abs': lambda: abs(model.magnetization()),
    }
    result = run_chain(model, config, observables=observables)
    assert set(result.observables) == set(observables)

    u4_value, u4_err = result.binder_cumulant()
    chi, chi_err = result.susceptibility()
    assert -0.5 < u4_value <= 1.0 + 1e-12
    assert u4_err >= 0.0
    assert chi >= -1e-12
    assert chi_err >= 0.0


def test_overrelax_requires_support():
    model = IsingModel(rect_graph(3, 3), beta=0.3)
    with pytest.raises(ValueError):
        run_chain(model, small_config(n_overrelax=1))


def test_thermalization_check():
    frozen = Accumulator()
    for _ in range(20):
        frozen.record(1.0)
    assert thermalization_check(frozen)

    rng = np.random.default_rng(9)
    shifted = Accumulator()
    for v in np.concatenate([rng.normal(0.0, 1.0, 200), rng.normal(5.0, 1.0, 200)]):
        shifted.record(v)
    assert not thermalization_check(shifted)

    stationary = Accumulator()
    for v in rng.normal(0.0, 1.0, 400):
        stationary.record(v)
    assert thermalization_check(stationary)

    assert not thermalization_check(Accumulator())


def main():
    tests = [obj for name, obj in sorted(globals().items()) if name.startswith('test_')]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"  ✓ {test.__name__}")
        except Exception as exc:
            failed += 1
            print(f"  ✗ {test.__name__}: {exc!r}")
    print(f"\nPassed: {len(tests) - failed}/{len(tests)}")
    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
