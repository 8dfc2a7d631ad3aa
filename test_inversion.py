# Copyright 2014, Jerome Fung
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

'''
End to end inversions of simulated multi-exponential data.
'''

import warnings

import numpy as np
import pytest
from numpy.testing import assert_allclose

from contin_core import ContinInputs, InvalidDimension, \
    OptimizerNonconvergence, CONVERGED, ITERATION_LIMIT
from contin_fixed_alpha import solve_alpha, solve_series, invert
from optimization import BoxMinimizer, OptimizerResult, ScipyBoxMinimizer
from problem_setup import second_difference
from synthetic import multi_exponential


class RecordingMinimizer(BoxMinimizer):
    '''
    Doesn't iterate; records what it was given and hands back x0.
    '''
    def __init__(self):
        self.calls = []

    def minimize(self, callbacks, constraints, x0, max_iter = 100000,
                 iteration_hook = None):
        self.calls.append((callbacks, constraints, x0, max_iter))
        if iteration_hook is not None:
            iteration_hook(1, x0, callbacks.value(x0))
        return OptimizerResult(x0, ITERATION_LIMIT, 1, callbacks.value(x0),
                               'not iterated')


class TestClass():
    def setup_method(self):
        # two components: intensities 1, 2 at decay constants 0.4, 1.6
        self.samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 1000,
                                         0., 4.)
        self.contin_inputs = ContinInputs(n_grid = 10,
                                          grid_bounds = (0.1, 4.0),
                                          kernel_type = 'exponential',
                                          alpha = 0.01)
        self.soln = solve_alpha(self.samples, self.contin_inputs)

    def test_converged(self):
        assert self.soln.status == CONVERGED
        assert self.soln.converged
        assert self.soln.n_iter > 0

    def test_support(self):
        assert_allclose(self.soln.grid, np.linspace(0.1, 4.0, 10))
        assert len(self.soln.amplitudes) == 10
        assert self.soln.alpha == 0.01

    def test_nonneg(self):
        assert np.all(self.soln.amplitudes >= 0.)
        assert np.all(self.soln.amplitudes <= 100.)

    def test_fit(self):
        rms = np.sqrt(self.soln.chisq / len(self.samples))
        assert rms < 1e-2
        # the grid cannot represent the slow tail exactly; the offset
        # absorbs a few percent of y(0) = 3
        assert abs(self.soln.offset) < 0.05 * 3.
        # y(0) = sum of intensities = integral of s + b
        zeroth = self.soln.moments((0, 1))[0]
        assert_allclose(zeroth + self.soln.offset, 3., rtol = 3e-2)

    def test_spectrum_shape(self):
        g = self.soln.amplitudes
        moments = self.soln.moments((0, 2))
        # true mean decay constant (1 * 0.4 + 2 * 1.6) / 3 = 1.2
        mean_tau = moments[1] / moments[0]
        assert 0.9 < mean_tau < 1.6
        # weight concentrated away from the long-time edge of the grid
        assert g[-1] < 0.5 * g.max()

    def test_two_peaks(self):
        g = self.soln.amplitudes
        grid = self.soln.grid
        # interior local maxima standing above the small wiggles
        peaks = [j for j in range(1, len(g) - 1)
                 if g[j] > g[j - 1] and g[j] > g[j + 1] and
                 g[j] > 0.2 * g.max()]
        assert len(peaks) == 2
        first, second = peaks
        # grid point nearest tau = 0.4
        assert first == np.argmin(abs(grid - 0.4))
        assert 1.4 <= grid[second] <= 2.3
        # dip between the peaks
        dip = g[first + 1:second].min()
        assert dip < 0.5 * min(g[first], g[second])

    def test_statistics(self):
        assert_allclose(self.soln.y_soln + self.soln.residuals,
                        self.samples.y)
        assert_allclose(self.soln.Valpha,
                        self.soln.chisq + 1e-4 * self.soln.regularizer_contrib)


def test_smoothing_increases_with_alpha():
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 200, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 10, grid_bounds = (0.1, 4.0))
    series = solve_series(samples, contin_inputs, [1.0, 0.01, 0.1])

    assert_allclose(series.alphas, [0.01, 0.1, 1.0])
    roughness = [np.sum(second_difference(soln.amplitudes)**2)
                 for soln in series.solutions]
    assert_allclose(roughness, [soln.regularizer_contrib for soln in series])
    for rough_small_alpha, rough_big_alpha in zip(roughness[:-1],
                                                  roughness[1:]):
        assert rough_big_alpha <= rough_small_alpha * (1. + 1e-3)
    assert roughness[-1] < roughness[0]


def test_amplitude_bounds():
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 200, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 8, grid_bounds = (0.1, 4.0),
                                 alpha = 0.01, amplitude_bounds = (0., 1.),
                                 offset_bounds = (-0.5, 0.5))
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', OptimizerNonconvergence)
        soln = solve_alpha(samples, contin_inputs)
    assert np.all(soln.amplitudes >= 0.)
    assert np.all(soln.amplitudes <= 1.)
    assert -0.5 <= soln.offset <= 0.5


def test_iteration_limit():
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 200, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 10, grid_bounds = (0.1, 4.0),
                                 alpha = 0.01, max_iter = 1)
    with pytest.warns(OptimizerNonconvergence):
        soln = solve_alpha(samples, contin_inputs)
    assert soln.status == ITERATION_LIMIT
    assert not soln.converged
    # best point so far is still returned
    assert len(soln.amplitudes) == 10
    assert np.all(soln.amplitudes >= 0.)


def test_trust_constr():
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 100, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 6, grid_bounds = (0.1, 4.0),
                                 alpha = 0.1, max_iter = 200,
                                 method = 'trust-constr')
    with warnings.catch_warnings():
        warnings.simplefilter('ignore', OptimizerNonconvergence)
        soln = solve_alpha(samples, contin_inputs)
    assert soln.status in (CONVERGED, ITERATION_LIMIT)
    assert np.all(soln.amplitudes >= 0.)
    assert np.all(soln.amplitudes <= 100.)


def test_custom_optimizer():
    samples = multi_exponential([1.0], [1.0], 50, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 5, grid_bounds = (0.5, 2.5),
                                 initial_amplitude = 200., max_iter = 7)
    optimizer = RecordingMinimizer()
    hook_calls = []
    def hook(iteration, x, f):
        hook_calls.append((iteration, f))

    with pytest.warns(OptimizerNonconvergence):
        soln = solve_alpha(samples, contin_inputs, alpha = 0.3,
                           optimizer = optimizer,
                           iteration_hook = hook)

    assert len(optimizer.calls) == 1
    callbacks, constraints, x0, max_iter = optimizer.calls[0]
    assert callbacks.n == 6
    assert constraints.n == 6
    assert max_iter == 7
    # starting point clipped into the box
    assert_allclose(x0, [100., 100., 100., 100., 100., 0.])
    assert len(hook_calls) == 1

    # status and point reported as given
    assert soln.status == ITERATION_LIMIT
    assert soln.message == 'not iterated'
    assert_allclose(soln.amplitudes, 100.)
    assert soln.offset == 0.
    assert soln.alpha == 0.3


def test_degenerate_grid():
    samples = multi_exponential([1.0], [1.0], 50, 0., 4.)
    contin_inputs = ContinInputs(n_grid = 2, grid_bounds = (0.1, 4.0),
                                 alpha = 0.01)
    optimizer = RecordingMinimizer()
    with pytest.raises(InvalidDimension):
        solve_alpha(samples, contin_inputs, optimizer = optimizer)
    assert optimizer.calls == []


def test_invert():
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 200, 0., 4.)
    soln = invert(samples.t, samples.y, samples.variance, 0.1, 4.0, 10, 0.01,
                  0, max_iter = 50000)
    assert len(soln.grid) == 10
    assert soln.status in (CONVERGED, ITERATION_LIMIT)
    assert np.all(soln.amplitudes >= 0.)

    with pytest.raises(InvalidDimension):
        invert(samples.t, samples.y, samples.variance, 0.1, 4.0, 2, 0.01)


def test_unknown_method():
    with pytest.raises(ValueError):
        ScipyBoxMinimizer('Nelder-Mead')
