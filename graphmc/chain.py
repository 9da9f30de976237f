"""
Reference Markov-chain driver.

Runs a fixed update schedule on a model, records update diagnostics every
iteration and observables every ``n_skip`` iterations after
thermalization. Geometry setup, persistence and argument handling stay
with the caller.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple

from .config import ChainConfig
from .statistics import (
    Accumulator,
    jackknife_susceptibility,
    jackknife_u4,
    susceptibility,
    u4,
)


@dataclass
class ChainResult:
    """Accumulators collected by ``run_chain``."""
    observables: Dict[str, Accumulator]
    cluster_size: Accumulator = field(default_factory=lambda: Accumulator('cluster_size'))
    sw_clusters: Accumulator = field(default_factory=lambda: Accumulator('sw_clusters'))
    accept_metropolis: Accumulator = field(default_factory=lambda: Accumulator('accept_metropolis'))
    accept_overrelax: Accumulator = field(default_factory=lambda: Accumulator('accept_overrelax'))
    demon: Accumulator = field(default_factory=lambda: Accumulator('demon'))

    def __getitem__(self, name: str) -> Accumulator:
        return self.observables[name]

    def binder_cumulant(self) -> Tuple[float, float]:
        """U4 of the magnetization and its jackknife error."""
        m2 = self.observables['m2'].history
        m4 = self.observables['m4'].history
        return u4(m2, m4), jackknife_u4(m2, m4)

    def susceptibility(self) -> Tuple[float, float]:
        """<m²> - <|m|>² and its jackknife error (per unit volume)."""
        m2 = self.observables['m2'].history
        m_abs = self.observables['m_abs'].history
        return susceptibility(m2, m_abs), jackknife_susceptibility(m2, m_abs)


def default_observables(model) -> Dict[str, Callable[[], float]]:
    """Magnetization moments and the action."""
    def m2():
        return model.magnetization() ** 2

    def m4():
        return model.magnetization() ** 4

    return {
        'm': model.magnetization,
        'm_abs': lambda: abs(model.magnetization()),
        'm2': m2,
        'm4': m4,
        'action': model.action,
    }


def run_chain(
    model,
    config: ChainConfig,
    observables: Optional[Dict[str, Callable[[], float]]] = None,
    verbose: bool = False,
) -> ChainResult:
    """
    Run ``config.n_therm + config.n_traj`` iterations on ``model``.

    Each iteration applies, in order: ``n_wolff`` Wolff updates,
    ``n_sw`` Swendsen-Wang updates, ``n_metropolis`` Metropolis sweeps and
    ``n_overrelax`` overrelaxation sweeps. The model's own RandomStream is
    used throughout; ``config.seed`` is for the caller when building it.
    When overrelaxation runs, the demon energy is recorded alongside the
    observables in ``result.demon``.

    Parameters
    ----------
    model : FieldModel
    config : ChainConfig
    observables : dict, optional
        Name -> zero-argument callable. Defaults to ``default_observables``.
    verbose : bool
        Print progress every 10% of the run.

    Returns
    -------
    result : ChainResult
    """
    config.validate()
    if config.n_overrelax and not hasattr(model, 'overrelax'):
        raise ValueError(f"{type(model).__name__} does not support overrelaxation")

    if observables is None:
        observables = default_observables(model)
    result = ChainResult(observables={name: Accumulator(name) for name in observables})

    if config.cold_start:
        model.cold_start()
    else:
        model.hot_start()

    n_nodes = model.n_nodes
    n_total = config.n_iterations
    report_every = max(n_total // 10, 1)

    for n in range(n_total):
        if config.n_wolff:
            size_sum = sum(model.wolff_update() for _ in range(config.n_wolff))
            result.cluster_size.record(size_sum / (config.n_wolff * n_nodes))
        if config.n_sw:
            count_sum = sum(model.swendsen_wang_update() for _ in range(config.n_sw))
            result.sw_clusters.record(count_sum / config.n_sw)
        if config.n_metropolis:
            accept = sum(model.metropolis_sweep() for _ in range(config.n_metropolis))
            result.accept_metropolis.record(accept / config.n_metropolis)
        if config.n_overrelax:
            accept = sum(model.overrelax() for _ in range(config.n_overrelax))
            result.accept_overrelax.record(accept / config.n_overrelax)

        if verbose and n % report_every == 0:
            phase = "therm" if n < config.n_therm else "traj"
            print(f"  Sweep {n} ({phase}): m = {model.magnetization():+.4f}, "
                  f"S = {model.action():.6f}")

        if n < config.n_therm or (n - config.n_therm) % config.n_skip:
            continue

        for name, fn in observables.items():
            result.observables[name].record(fn())
        if config.n_overrelax:
            result.demon.record(model.overrelax_demon)

    if verbose:
        for acc in result.observables.values():
            print(f"  {acc.name}: {acc.mean():+.8e} ({acc.error():.8e}), "
                  f"tau = {acc.autocorr_time():.2f}")
        if config.n_overrelax:
            print(f"  demon: {result.demon.mean():.8e} ({result.demon.error():.8e})")

    return result


def thermalization_check(acc: Accumulator, tolerance: float = 3.0) -> bool:
    """
    True when the front and back halves of a series agree.

    Compares the two half means against their combined naive error scaled
    by sqrt(2 τ_int) of each half.
    """
    half = acc.n // 2
    if half < 2:
        return False
    front = np.asarray(acc.history[:half])
    back = np.asarray(acc.history[acc.n - half:])
    tau_f = max(acc.autocorr_front(), 0.5)
    tau_b = max(acc.autocorr_back(), 0.5)
    err_f = front.std(ddof=1) / np.sqrt(half) * np.sqrt(2.0 * tau_f)
    err_b = back.std(ddof=1) / np.sqrt(half) * np.sqrt(2.0 * tau_b)
    sigma = np.hypot(err_f, err_b)
    diff = abs(front.mean() - back.mean())
    if sigma == 0.0:
        return diff == 0.0
    return bool(diff <= tolerance * sigma)


if __name__ == "__main__":
    from .geometry import rect_graph
    from .models import IsingModel

    print("=" * 60)
    print("ISING ON A 16x16 PERIODIC LATTICE - WOLFF + METROPOLIS")
    print("=" * 60)

    config = ChainConfig(seed=1234, n_therm=200, n_traj=2000, n_skip=2, n_wolff=4)
    model = IsingModel(rect_graph(16, 16), beta=0.44, rng=config.make_stream())
    result = run_chain(model, config, verbose=True)

    u4_value, u4_err = result.binder_cumulant()
    chi, chi_err = result.susceptibility()
    print(f"\n  cluster_size/V: {result.cluster_size.mean():.4f}")
    print(f"  U4: {u4_value:.6f} ({u4_err:.6f})")
    print(f"  chi/V: {chi:.6e} ({chi_err:.6e})")
    print(f"  thermalized: {thermalization_check(result['m_abs'])}")
