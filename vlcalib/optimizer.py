"""Common interface for derivative-free optimizers."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

Function = Callable[[np.ndarray], float]
Callback = Callable[[np.ndarray], None]
ParticlesCallback = Callable[[Sequence[np.ndarray]], None]


@dataclass
class OptimizationResult:
    """Outcome of an optimization run."""

    converged: bool = False
    num_iterations: int = 0
    x: Optional[np.ndarray] = None
    y: float = math.nan


class Optimizer(ABC):
    """Base class of optimizers that minimise a scalar function of a vector."""

    def __init__(self) -> None:
        self.callback: Optional[Callback] = None
        self.particles_callback: Optional[ParticlesCallback] = None

    @abstractmethod
    def optimize(self, function: Function, x0) -> OptimizationResult:
        """Minimise ``function`` starting from ``x0``."""

    def set_callback(self, f: Optional[Callback]) -> None:
        """Register a function called with the current best estimate after each iteration."""
        self.callback = f

    def set_particles_callback(self, f: Optional[ParticlesCallback]) -> None:
        """Register a function called with all current samples after each iteration."""
        self.particles_callback = f

    def _notify(self, x: np.ndarray) -> None:
        if self.callback is not None:
            self.callback(x.copy())

    def _notify_particles(self, particles: Sequence[np.ndarray]) -> None:
        if self.particles_callback is not None:
            self.particles_callback([p.copy() for p in particles])