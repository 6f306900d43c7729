import numpy as np
import pytest

from vlcalib.optimizer import OptimizationResult, Optimizer


class _SinglePoint(Optimizer):
    def optimize(self, function, x0):
        x = np.asarray(x0, dtype=float)
        self._notify(x)
        self._notify_particles([x, x + 1.0])
        return OptimizationResult(converged=True, num_iterations=1, x=x, y=function(x))


def test_optimizer_is_abstract():
    with pytest.raises(TypeError):
        Optimizer()


def test_result_defaults():
    result = OptimizationResult()
    assert result.converged is False
    assert result.num_iterations == 0
    assert result.x is None


def test_callbacks_are_invoked():
    opt = _SinglePoint()
    seen = []
    particles_seen = []
    Optimizer.set_callback(opt, seen.append)
    Optimizer.set_particles_callback(opt, particles_seen.append)
    result = opt.optimize(lambda v: float(np.sum(v**2)), [1.0, 2.0])
    assert result.y == pytest.approx(5.0)
    assert len(seen) == 1
    np.testing.assert_allclose(seen[0], [1.0, 2.0])
    assert len(particles_seen) == 1
    assert len(particles_seen[0]) == 2


def test_callbacks_can_be_cleared():
    opt = _SinglePoint()
    seen = []
    Optimizer.set_callback(opt, seen.append)
    Optimizer.set_callback(opt, None)
    result = opt.optimize(lambda v: 0.0, [0.0])
    assert seen == []
    assert result.y == 0.0