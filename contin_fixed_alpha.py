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
contin_fixed_alpha

Solve the inversion at given regularization strength(s).

.. moduleauthor:: Jerome Fung <jfung@brandeis.edu>
'''

import logging
import warnings

import numpy as np

from contin_core import ContinInputs, InversionResult, SolutionSeries, \
    OptimizerNonconvergence
from computations import ObjectiveEvaluator, solution_statistics
from optimization import ObjectiveCallbacks, BoxConstraints, \
    ScipyBoxMinimizer
from problem_setup import setup_parameters, setup_bounds, \
    setup_initial_point
from samples import SampleSet

logger = logging.getLogger(__name__)


def solve_alpha(samples, contin_inputs, alpha = None, optimizer = None,
                iteration_hook = None):
    '''
    samples: instance of samples.SampleSet
    contin_inputs: instance of contin_core.ContinInputs
    alpha: overrides contin_inputs.alpha if given
    optimizer: a BoxMinimizer; default ScipyBoxMinimizer(contin_inputs.method)
    iteration_hook: passed to the optimizer, see optimization.iteration_echo

    Returns:
    solution: instance of contin_core.InversionResult

    The optimizer's termination status is reported as is. If it did not
    converge, an OptimizerNonconvergence warning is issued and the last
    point is returned anyway.
    '''
    if alpha is None:
        alpha = contin_inputs.alpha
    # raises before any optimizer is built if the inputs are bad
    params = _setup_inversion(samples, contin_inputs, alpha)

    if optimizer is None:
        optimizer = ScipyBoxMinimizer(contin_inputs.method)

    evaluator = ObjectiveEvaluator(params)
    callbacks = ObjectiveCallbacks.from_evaluator(evaluator)
    constraints = BoxConstraints(*setup_bounds(params.n_grid,
                                               contin_inputs.amplitude_bounds,
                                               contin_inputs.offset_bounds))
    x0 = constraints.project(setup_initial_point(
            params.n_grid, contin_inputs.initial_amplitude,
            contin_inputs.initial_offset))

    logger.debug('Inverting %d samples on %d grid points, alpha = %g',
                 len(params.data), params.n_grid, alpha)
    opt_result = optimizer.minimize(callbacks, constraints, x0,
                                    contin_inputs.max_iter, iteration_hook)

    if opt_result.success:
        logger.info('Convergence in %d iterations', opt_result.n_iter)
    else:
        logger.warning('Stopped with %d iterations: %s', opt_result.n_iter,
                       opt_result.message)
        warnings.warn('Optimizer stopped without converging ({0}): '
                      '{1}'.format(opt_result.status, opt_result.message),
                      OptimizerNonconvergence)

    x = np.array(opt_result.x, dtype = float)
    y_soln, residuals, chisq, reg_contrib, Valpha = \
        solution_statistics(params, x)
    return InversionResult(np.array(params.grid), x[:-1].copy(), float(x[-1]),
                           opt_result.status, opt_result.n_iter,
                           opt_result.message, alpha,
                           np.array(params.quad_weights), y_soln, residuals,
                           chisq, reg_contrib, Valpha)


def solve_series(samples, contin_inputs, alphas, optimizer = None,
                 iteration_hook = None):
    '''
    Solve at each of the given values of alpha. No value is singled out;
    choosing alpha is left to the caller.

    Returns:
    instance of contin_core.SolutionSeries, sorted by ascending alpha
    '''
    alphas = sorted(alphas)
    solns = [solve_alpha(samples, contin_inputs, alpha, optimizer,
                         iteration_hook) for alpha in alphas]
    return SolutionSeries(solns, np.array(alphas))


def invert(t, y, variance, tau0, tau1, n_grid, alpha, kernel = 0,
           **kwargs):
    '''
    Find s(tau) and b such that y(t) ~ integral(K(t, tau) s(tau)) + b.

    t, y, variance: observed data
    tau0, tau1: smallest and largest tau
    n_grid: number of equally spaced grid points
    alpha: strength of regularizer
    kernel: 0 multi-exponential, 1 multi-lorentzian
    kwargs: other ContinInputs settings (amplitude_bounds, max_iter, ...)

    Returns InversionResult; result.grid, result.amplitudes and
    result.offset are (tau, s, b).
    '''
    contin_inputs = ContinInputs(n_grid = n_grid, grid_bounds = (tau0, tau1),
                                 kernel_type = kernel, alpha = alpha,
                                 **kwargs)
    return solve_alpha(SampleSet(t, y, variance), contin_inputs)


def _setup_inversion(samples, contin_inputs, alpha = None):
    '''
    Inputs:
    SampleSet object
    ContinInputs object
    '''
    if alpha is None:
        alpha = contin_inputs.alpha
    return setup_parameters(samples.t, samples.y, samples.variance, alpha,
                            contin_inputs.grid_bounds[0],
                            contin_inputs.grid_bounds[1],
                            contin_inputs.n_grid, contin_inputs.kernel_type)
