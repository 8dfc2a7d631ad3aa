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
problem_setup

Functions for setting up the regularized inversion problem.

We minimize

sum_k w_k (y_k - b - sum_j c_j K_kj g_j)^2 + alpha^2 ||D2 g||^2

over x = (g, b), where c are quadrature weights and D2 is a discrete
second derivative.

"Matrices" and "vectors" refer to 2 and 1-dimensional ndarrays.
'''

import numpy as np

from contin_core import InversionParameters, InvalidDimension, InvalidInput, \
    DomainError, setup_grid, setup_quadrature
from kernels import KERNEL_FUNCS, EXPONENTIAL, LORENTZIAN, kernel_name


def setup_kernel_matrix(grid, tbase, kernel_func):
    '''
    Kernel matrix K_ij = kernel_func(grid[j], tbase[i]), (n_ts, n_grid).
    Quadrature weights are applied by the objective, not here.
    '''
    n_grid = len(grid)
    n_ts = len(tbase)

    Fk = np.zeros((n_ts, n_grid))
    for i in np.arange(n_ts):
        Fk[i] = kernel_func(grid, tbase[i])
    return Fk


def setup_weights(variance):
    '''
    Noise weights w_k = 1 / variance_k multiplying each squared residual.
    '''
    variance = np.asarray(variance, dtype = float)
    if np.any(variance <= 0):
        raise InvalidInput('Variances must be positive; {0} are not'.format(
                np.sum(variance <= 0)))
    return 1. / variance


def second_difference(x):
    '''
    Discrete second derivative of x, same length as x.

    Interior: x[i-1] - 2 x[i] + x[i+1]. At the ends the missing neighbour
    is taken to be 0, so d[0] = -2 x[0] + x[1] and
    d[-1] = x[-2] - 2 x[-1]. The input is not modified.
    '''
    x = np.asarray(x, dtype = float)
    d2x = -2. * x
    d2x[1:] += x[:-1]
    d2x[:-1] += x[1:]
    return d2x


def fourth_difference(x):
    '''
    second_difference applied twice. The second difference matrix is
    symmetric, so this is D2^T D2 x, the gradient direction of ||D2 x||^2.
    '''
    return second_difference(second_difference(x))


def regularizer_matrix(n_grid):
    '''
    Dense matrix form of second_difference, (n_grid, n_grid). Tests and
    diagnostics only; the objective never forms it.
    '''
    # second_difference acts along the first axis, i.e. on each column
    return second_difference(np.identity(n_grid))


def setup_bounds(n_grid, amplitude_bounds = (0., 100.),
                 offset_bounds = (-np.inf, np.inf)):
    '''
    Lower and upper bound vectors, length n_grid + 1, for the box
    constraints on x = (g, b).
    '''
    lower = np.concatenate((np.ones(n_grid) * amplitude_bounds[0],
                            [offset_bounds[0]]))
    upper = np.concatenate((np.ones(n_grid) * amplitude_bounds[1],
                            [offset_bounds[1]]))
    if np.any(lower > upper):
        raise InvalidInput('Lower bounds exceed upper bounds: '
                           'amplitudes {0}, offset {1}'.format(
                amplitude_bounds, offset_bounds))
    return lower, upper


def setup_initial_point(n_grid, amplitude = 1., offset = 0.):
    '''
    Starting point for the optimizer: every g_j = amplitude, b = offset.
    '''
    return np.concatenate((np.ones(n_grid) * amplitude, [offset]))


def setup_parameters(tbase, data, variance, alpha, grid_min, grid_max,
                     n_grid, kernel_type = EXPONENTIAL):
    '''
    Build the problem parameters for one inversion.

    Parameters
    ----------
    tbase, data, variance:
        samples (t, y, variance of y), all length n_t >= 1
    alpha:
        regularization strength, >= 0
    grid_min, grid_max, n_grid:
        n_grid >= 3 equally spaced grid points on [grid_min, grid_max]
    kernel_type:
        'exponential' (0) or 'lorentzian' (1)

    Returns
    -------
    InversionParameters

    Raises
    ------
    InvalidDimension, InvalidInput, DomainError
        before anything is built; no partial result is returned.
    '''
    tbase = np.asarray(tbase, dtype = float)
    data = np.asarray(data, dtype = float)
    variance = np.asarray(variance, dtype = float)

    if tbase.ndim != 1 or len(tbase) < 1:
        raise InvalidDimension('Need at least one sample')
    if data.shape != tbase.shape or variance.shape != tbase.shape:
        raise InvalidDimension('Mismatched sample lengths: t {0}, y {1}, '
                               'variance {2}'.format(tbase.shape, data.shape,
                                                     variance.shape))
    if alpha < 0:
        raise InvalidInput('alpha must be non-negative, got {0}'.format(alpha))

    grid, dh = setup_grid(grid_min, grid_max, n_grid)

    name = kernel_name(kernel_type)
    if name is None:
        raise InvalidInput('Unknown kernel type {0!r}'.format(kernel_type))
    if name == EXPONENTIAL and np.any(grid <= 0):
        raise DomainError('Exponential kernel needs tau > 0; grid starts '
                          'at {0}'.format(grid[0]))
    if name == LORENTZIAN and np.any(grid == 0):
        raise DomainError('Lorentzian kernel needs tau != 0')

    noise_weights = setup_weights(variance)
    quad_weights = setup_quadrature(grid, dh)
    kernel_matrix = setup_kernel_matrix(grid, tbase, KERNEL_FUNCS[name])
    if not np.all(np.isfinite(kernel_matrix)):
        raise DomainError('Kernel {0} not finite on grid [{1}, {2}]'.format(
                name, grid_min, grid_max))

    return InversionParameters(kernel_matrix, quad_weights, noise_weights,
                               tbase, data, grid, alpha, name)
