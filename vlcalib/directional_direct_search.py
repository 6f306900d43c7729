"""Coordinate-wise directional direct search optimizer."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .optimizer import Function, OptimizationResult, Optimizer


@dataclass
class DirectionalDirectSearchParams:
    """Parameters of the directional direct search."""

    init_alpha: float = 0.5
    min_alpha: float = 1e-5
    alpha_dec_factor: float = 1.0 / 8.0
    alpha_inc_factor: float = 2.0
    max_iterations: int = 1024


class DirectionalDirectSearch(Optimizer):
    """Minimise a function by stepping along the coordinate axes."""

    def __init__(self, params: DirectionalDirectSearchParams | None = None) -> None:
        super().__init__()
        self.params = params if params is not None else DirectionalDirectSearchParams()

    def optimize(self, function: Function, x0) -> OptimizationResult:
        """Minimise ``function`` starting from ``x0``."""
        p = self.params
        x = np.array(x0, dtype=float).reshape(-1)
        result = OptimizationResult(x=x.copy(), y=float(function(x.copy())))

        alpha = p.init_alpha
        for i in range(p.max_iterations):
            result.num_iterations = i

            y = float(function(x.copy()))
            x, y, improved = self._coordinate_search(function, x, y, alpha)
            alpha *= p.alpha_inc_factor if improved else p.alpha_dec_factor
            result.x, result.y = x.copy(), y

            self._notify(x)

            if alpha < p.min_alpha:
                break

        return result

    def _coordinate_search(self, function: Function, x: np.ndarray, y: float, alpha: float):
        y0 = y
        for direction in np.eye(x.size):
            x, y, decreased = self._try_direction(function, x, y, direction, alpha)
            if not decreased:
                x, y, _ = self._try_direction(function, x, y, -direction, alpha)
        return x, y, y < y0

    @staticmethod
    def _try_direction(function: Function, x: np.ndarray, y: float, direction: np.ndarray, alpha: float):
        decreased = False
        while True:
            xi = x + alpha * direction
            yi = float(function(xi.copy()))
            if yi > y:
                break
            decreased = True
            x, y = xi, yi
        return x, y, decreased