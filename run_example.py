'''
Invert a simulated two-component exponential decay.

Compares the analytic gradient with finite differences at the starting
point, runs the inversion, and writes in.txt (t, y) and out.txt (tau, s).
'''
import logging

import numpy as np

from contin_core import ContinInputs
from computations import ObjectiveEvaluator
from contin_fixed_alpha import solve_alpha, _setup_inversion
from data_io import save_columns, save_result
from optimization import iteration_echo
from problem_setup import setup_initial_point
from synthetic import multi_exponential

logger = logging.getLogger('run_example')

if __name__ == '__main__':
    logging.basicConfig(level = logging.INFO,
                        format = '%(name)s %(levelname)s: %(message)s')

    # simulated data: intensities 1 and 2 at decay constants 0.4 and 1.6
    samples = multi_exponential([1.0, 2.0], [0.4, 1.6], 1000, 0., 4.)

    contin_inputs = ContinInputs(n_grid = 10, grid_bounds = (0.1, 4.0),
                                 kernel_type = 'exponential', alpha = 0.01)

    # check gradient at x = (1, ..., 1) by forward differences
    evaluator = ObjectiveEvaluator(_setup_inversion(samples, contin_inputs))
    x = setup_initial_point(contin_inputs.n_grid, 1., 1.)
    f = evaluator.value(x)
    grad = evaluator.gradient(x)
    h = 1e-5
    for i in np.arange(len(x)):
        xh = x.copy()
        xh[i] += h
        logger.info('G[%d] = (%f, %f)', i, grad[i],
                    (evaluator.value(xh) - f) / h)

    result = solve_alpha(samples, contin_inputs,
                         iteration_hook = iteration_echo(100))

    save_columns(samples.t, samples.y, 'in.txt')
    save_result(result, 'out.txt')
    logger.info('status: %s', result.status)
