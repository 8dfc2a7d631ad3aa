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
optimization

Interface to box-constrained minimizers.

The inversion only supplies callbacks (objective, gradient, combined
objective and gradient, Hessian-vector product), bounds and a starting
point. Anything implementing BoxMinimizer.minimize can do the iterating;
ScipyBoxMinimizer hands the work to scipy.optimize.minimize.

.. moduleauthor:: Jerome Fung <jfung@brandeis.edu>
'''

import logging

import numpy as np
from scipy.optimize import minimize, Bounds

from contin_core import CONVERGED, ITERATION_LIMIT, ABNORMAL, InvalidInput

logger = logging.getLogger(__name__)


class ObjectiveCallbacks(object):
    '''
    n: number of variables
    value(x) -> float
    gradient(x) -> ndarray (n)
    value_and_gradient(x) -> (float, ndarray (n))
    hessian_vector(x, v) -> ndarray (n)
    '''
    def __init__(self, n, value, gradient, value_and_gradient,
                 hessian_vector):
        self.n = n
        self.value = value
        self.gradient = gradient
        self.value_and_gradient = value_and_gradient
        self.hessian_vector = hessian_vector

    @classmethod
    def from_evaluator(cls, evaluator):
        return cls(evaluator.n_x, evaluator.value, evaluator.gradient,
                   evaluator.value_and_gradient, evaluator.hessian_vector)


class BoxConstraints(object):
    def __init__(self, lower, upper):
        self.lower = np.asarray(lower, dtype = float)
        self.upper = np.asarray(upper, dtype = float)

    @property
    def n(self):
        return len(self.lower)

    def project(self, x):
        return np.clip(x, self.lower, self.upper)


class OptimizerResult(object):
    '''
    x: final point
    status: CONVERGED, ITERATION_LIMIT or ABNORMAL
    n_iter: iterations performed
    fun: objective at x
    message: backend's own description of why it stopped
    '''
    def __init__(self, x, status, n_iter, fun, message = ''):
        self.x = x
        self.status = status
        self.n_iter = n_iter
        self.fun = fun
        self.message = message

    @property
    def success(self):
        return self.status == CONVERGED


class BoxMinimizer(object):
    '''
    Minimize callbacks.value subject to lower <= x <= upper.
    '''
    def minimize(self, callbacks, constraints, x0, max_iter = 100000,
                 iteration_hook = None):
        '''
        Parameters
        ----------
        callbacks:
            ObjectiveCallbacks
        constraints:
            BoxConstraints, same length as x0
        x0:
            initial point
        max_iter:
            maximum number of iterations
        iteration_hook:
            called as iteration_hook(iteration, x, f) after every iteration

        Returns
        -------
        OptimizerResult
        '''
        raise NotImplementedError


class ScipyBoxMinimizer(BoxMinimizer):
    '''
    Box-constrained minimization with scipy.optimize.minimize.

    method:
        'L-BFGS-B' (projected quasi-Newton; Hessian products unused) or
        'trust-constr' (uses the Hessian-vector product)
    options:
        extra options passed through to scipy
    '''
    # scipy status codes meaning the iteration cap was hit
    _LIMIT_STATUS = {'L-BFGS-B' : 1, 'trust-constr' : 0}

    def __init__(self, method = 'L-BFGS-B', options = None):
        if method not in self._LIMIT_STATUS:
            raise InvalidInput('Unsupported optimizer method {0!r}; use one '
                               'of {1}'.format(method,
                                               sorted(self._LIMIT_STATUS)))
        self.method = method
        self.options = options or {}

    def minimize(self, callbacks, constraints, x0, max_iter = 100000,
                 iteration_hook = None):
        options = {'maxiter' : max_iter}
        if self.method == 'L-BFGS-B':
            # don't let the evaluation cap stop the run before max_iter
            options['maxfun'] = max(15000, 20 * max_iter)
        options.update(self.options)

        kwargs = {}
        if self.method == 'trust-constr':
            kwargs['hessp'] = callbacks.hessian_vector

        n_calls = [0]
        def callback(intermediate_result):
            n_calls[0] += 1
            if iteration_hook is not None:
                iteration_hook(n_calls[0], intermediate_result.x,
                               intermediate_result.fun)

        res = minimize(callbacks.value_and_gradient, constraints.project(x0),
                       jac = True,
                       bounds = Bounds(constraints.lower, constraints.upper),
                       method = self.method, callback = callback,
                       options = options, **kwargs)

        if res.success:
            status = CONVERGED
        elif res.status == self._LIMIT_STATUS[self.method]:
            status = ITERATION_LIMIT
        else:
            status = ABNORMAL
        n_iter = getattr(res, 'nit', n_calls[0])
        logger.debug('%s finished: status %s (%s), %d iterations, f = %g',
                     self.method, status, res.message, n_iter, res.fun)
        return OptimizerResult(res.x, status, n_iter, res.fun,
                               str(res.message))


def iteration_echo(every = 100):
    '''
    Returns an iteration hook logging the first arguments and the
    objective every `every` iterations, e.g.

    100 f( +1.000e+00, +2.300e+00, +4.100e-01, ... ) = +3.210e-02
    '''
    def echo(iteration, x, f):
        if iteration % every == 0:
            logger.info('%4i f( %s, ... ) = %+6.3e', iteration,
                        ', '.join('%+6.3e' % xi for xi in x[:3]), f)
    return echo
