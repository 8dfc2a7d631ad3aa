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
contin_core

Define objects for working with box-constrained regularized inversion
of a Fredholm integral equation.

.. moduleauthor:: Jerome Fung <jfung@brandeis.edu>
'''

import numpy as np

from serialize import Serializable

# optimizer termination status
CONVERGED = 'converged'
ITERATION_LIMIT = 'iteration_limit_reached'
ABNORMAL = 'abnormal_termination'


class ContinError(ValueError):
    pass

class InvalidDimension(ContinError):
    '''
    Grid too small for a second derivative, no samples, or inputs of
    mismatched lengths.
    '''

class InvalidInput(ContinError):
    pass

class DomainError(ContinError):
    '''
    Kernel undefined on the chosen grid.
    '''

class OptimizerNonconvergence(RuntimeWarning):
    '''
    Issued (not raised) when the optimizer stops without meeting its
    optimality criterion. The best point found is still returned.
    '''


class ContinInputs(Serializable):
    '''
    Settings for an inversion that do not depend on the data.

    Parameters
    ----------
    n_grid:
        number of grid points m (>= 3)
    grid_bounds:
        (tau0, tau1), ends of the equally spaced grid
    kernel_type:
        'exponential' (or 0), 'lorentzian' (or 1)
    alpha:
        regularization strength
    amplitude_bounds:
        (lower, upper) box for every spectral amplitude
    offset_bounds:
        (lower, upper) box for the constant offset b
    initial_amplitude, initial_offset:
        starting point for the optimizer
    max_iter:
        iteration cap for the optimizer
    method:
        scipy.optimize.minimize method used by the default optimizer
    '''
    def __init__(self, n_grid = None, grid_bounds = None,
                 kernel_type = 'exponential', alpha = 0.,
                 amplitude_bounds = (0., 100.),
                 offset_bounds = (-np.inf, np.inf),
                 initial_amplitude = 1., initial_offset = 0.,
                 max_iter = 100000, method = 'L-BFGS-B'):
        self.n_grid = n_grid
        self.grid_bounds = grid_bounds
        self.kernel_type = kernel_type
        self.alpha = alpha
        self.amplitude_bounds = amplitude_bounds
        self.offset_bounds = offset_bounds
        self.initial_amplitude = initial_amplitude
        self.initial_offset = initial_offset
        self.max_iter = max_iter
        self.method = method


class InversionParameters(Serializable):
    '''
    Everything the objective needs, built once per inversion and never
    modified afterwards. Arrays are copied and flagged read-only.

    kernel_matrix: K, (n_t, n_grid)
    quad_weights: c, (n_grid)
    noise_weights: w = 1 / variance, (n_t)
    tbase, data: t and y, (n_t)
    grid: tau, (n_grid)
    alpha: regularization strength
    '''
    def __init__(self, kernel_matrix = None, quad_weights = None,
                 noise_weights = None, tbase = None, data = None,
                 grid = None, alpha = None, kernel_type = None):
        self.kernel_matrix = _frozen(kernel_matrix)
        self.quad_weights = _frozen(quad_weights)
        self.noise_weights = _frozen(noise_weights)
        self.tbase = _frozen(tbase)
        self.data = _frozen(data)
        self.grid = _frozen(grid)
        self.alpha = alpha
        self.kernel_type = kernel_type

    @property
    def n_grid(self):
        return len(self.grid)

    @property
    def n_x(self):
        # amplitudes plus offset
        return len(self.grid) + 1


class InversionResult(Serializable):
    def __init__(self, grid = None, amplitudes = None, offset = None,
                 status = None, n_iter = None, message = None, alpha = None,
                 quad_weights = None, y_soln = None, residuals = None,
                 chisq = None, regularizer_contrib = None, Valpha = None):
        '''
        grid, amplitudes: the spectral function s(tau_j) = g_j
        offset: constant b
        status: optimizer termination status, reported verbatim
        '''
        self.grid = grid
        self.amplitudes = amplitudes
        self.offset = offset
        self.status = status
        self.n_iter = n_iter
        self.message = message
        self.alpha = alpha
        self.quad_weights = quad_weights
        self.y_soln = y_soln
        self.residuals = residuals
        self.chisq = chisq
        self.regularizer_contrib = regularizer_contrib
        self.Valpha = Valpha

    @property
    def converged(self):
        return self.status == CONVERGED

    def moments(self, moment_range = (-1, 4)):
        return calculate_moments(self.grid, self.quad_weights,
                                 self.amplitudes, moment_range)


class SolutionSeries(Serializable):
    def __init__(self, solutions = None, alphas = None):
        self.solutions = solutions
        self.alphas = alphas

    def __len__(self):
        return len(self.solutions)

    def __getitem__(self, i):
        return self.solutions[i]


def _frozen(arr):
    if arr is None:
        return None
    arr = np.array(arr, dtype = float)
    arr.flags.writeable = False
    return arr

# Arguably the following functions belong in problem_setup
# rather than here, but avoid a circular import situation.

def setup_grid(grid_min, grid_max, n_grid):
    '''
    Set up equally spaced grid of points over which solution is computed.
    The second difference regularizer needs at least 3 points.
    '''
    if n_grid is None or n_grid < 3:
        raise InvalidDimension('Need at least 3 grid points, got {0}'.format(
                n_grid))
    if not grid_min < grid_max:
        raise InvalidInput('Grid bounds must satisfy tau0 < tau1, '
                           'got ({0}, {1})'.format(grid_min, grid_max))
    grid = np.linspace(grid_min, grid_max, n_grid)
    dh = (grid_max - grid_min) / (n_grid - 1.)
    return grid, dh


def setup_quadrature(grid, dh):
    '''
    Trapezoidal rule weights: dh/2 at the ends, dh elsewhere, so that
    the weights sum to grid[-1] - grid[0].
    '''
    weights = np.ones(len(grid))
    weights[0] = 0.5
    weights[-1] = 0.5
    return dh * weights


def calculate_moments(grid, quad_weights, soln, moment_range = (-1, 4)):
    '''
    Calculate moments of solution by quadrature.

    grid: grid points
    quad_weights: quadrature weights corresponding to grid points
    soln: amplitudes at grid points
    moment_range: range of moments to calculate

    The 0th moment is the integral of the spectral function.
    '''
    def moment_j(j):
        return (quad_weights * grid ** float(j) * soln).sum()

    return np.array([moment_j(power) for power in np.arange(*moment_range)])
