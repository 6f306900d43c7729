"""Nelder-Mead simplex optimizer."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .optimizer import Function, OptimizationResult, Optimizer


@dataclass
class NelderMeadParams:
    """Parameters of the Nelder-Mead method."""

    init_step: float = 0.1
    alpha: float = 1.0
    gamma: float = 2.0
    rho: float = 0.5
    sigma: float = 0.5
    max_iterations: int = 1024
    convergence_var_thresh: float = 1e-5


class NelderMead(Optimizer):
    """Minimise a function with the Nelder-Mead downhill simplex method."""

    def __init__(self, params: NelderMeadParams | None = None) -> None:
        super().__init__()
        self.params = params if params is not None else NelderMeadParams()

    def optimize(self, function: Function, x0) -> OptimizationResult:
        """Minimise ``function`` starting from ``x0``."""
        start = np.array(x0, dtype=float).reshape(-1)
        n = start.size
        if n == 0:
            raise ValueError("x0 must have at least one dimension")
        p = self.params

        def evaluate(vertex: np.ndarray) -> None:
            vertex[0] = function(vertex[1:].copy())

        # Each row holds the function value followed by the sample.
        simplex = np.empty((n + 1, n + 1))
        simplex[:, 1:] = start
        simplex[1:, 1:] += np.eye(n) * p.init_step
        for vertex in simplex:
            evaluate(vertex)

        result = OptimizationResult()
        for i in range(p.max_iterations):
            result.num_iterations = i
            simplex = simplex[np.argsort(simplex[:, 0], kind="stable")]
            if self._is_converged(simplex):
                result.converged = True
                break

            xo = simplex[:-1].mean(axis=0)
            evaluate(xo)

            worst = simplex[-1].copy()
            xr = xo + p.alpha * (xo - worst)
            evaluate(xr)

            if simplex[0, 0] <= xr[0] < simplex[n - 1, 0]:
                simplex[-1] = xr
            elif xr[0] < simplex[0, 0]:
                xe = xo + p.gamma * (xo - worst)
                evaluate(xe)
                simplex[-1] = xe if xe[0] < xr[0] else xr
            else:
                xc = xo + p.rho * (xo - worst)
                evaluate(xc)
                if xc[0] < worst[0]:
                    simplex[-1] = xc
                else:
                    simplex[1:] = simplex[0] + p.rho * (simplex[1:] - simplex[0])
                    for vertex in simplex[1:]:
                        evaluate(vertex)

            self._notify(simplex[0, 1:])
            if self.particles_callback is not None:
                self._notify_particles(list(simplex[:, 1:]))

        result.x = simplex[0, 1:].copy()
        result.y = float(simplex[0, 0])
        return result

    def _is_converged(self, simplex: np.ndarray) -> bool:
        deviation = simplex - simplex.mean(axis=0)
        variance = (deviation**2).sum(axis=0)
        return bool(variance[1:].sum() < self.params.convergence_var_thresh)