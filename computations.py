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
computations

Objective function, gradient and Hessian-vector product for the
box-constrained regularized inversion.

With x = (g, b), A = K diag(c), z = A g + b and W = diag(w):

f(x) = (y - z)^T W (y - z) + alpha^2 ||D2 g||^2

df/dg = 2 A^T W (z - y) + 2 alpha^2 D2 D2 g
df/db = 2 sum(W (z - y))

f is quadratic, so the Hessian is constant:

H v = [2 A^T W (A v_g + v_b) + 2 alpha^2 D2 D2 v_g,
       2 sum(W (A v_g + v_b))]

"Matrices" and "vectors" refer to 2 and 1-dimensional ndarrays.
'''

import numpy as np

from problem_setup import second_difference, fourth_difference


class ObjectiveEvaluator(object):
    '''
    Evaluate the objective and its derivatives for one set of
    InversionParameters. Inputs are not validated per call; x and v must
    have length n_grid + 1.
    '''
    def __init__(self, params):
        self.params = params
        # quadrature folded into the kernel, (n_t, n_grid)
        self.coeff_matrix = params.kernel_matrix * params.quad_weights
        self.coeff_matrix.flags.writeable = False
        self.alpha_sq = params.alpha**2

    @property
    def n_x(self):
        return self.params.n_x

    def predicted(self, x):
        '''
        Predicted signal z = A g + b.
        '''
        return np.dot(self.coeff_matrix, x[:-1]) + x[-1]

    def _weighted_residuals(self, x):
        z = self.predicted(x)
        return self.params.noise_weights * (z - self.params.data), z

    def _value(self, x, z):
        reg = np.sum(second_difference(x[:-1])**2)
        chisq = np.sum(self.params.noise_weights * (self.params.data - z)**2)
        return chisq + self.alpha_sq * reg

    def _gradient(self, x, wr):
        grad = np.empty(len(x))
        grad[:-1] = 2. * np.dot(self.coeff_matrix.T, wr) + \
            2. * self.alpha_sq * fourth_difference(x[:-1])
        grad[-1] = 2. * wr.sum()
        return grad

    def value(self, x):
        return self._value(x, self.predicted(x))

    def gradient(self, x):
        wr, z = self._weighted_residuals(x)
        return self._gradient(x, wr)

    def value_and_gradient(self, x):
        '''
        Objective and gradient from a single evaluation of z.
        '''
        wr, z = self._weighted_residuals(x)
        return self._value(x, z), self._gradient(x, wr)

    def hessian_vector(self, x, v):
        '''
        Product of the Hessian with direction v. The Hessian does not
        depend on x; x is accepted so this can be handed to optimizers
        expecting hessp(x, v).
        '''
        w_dz = self.params.noise_weights * self.predicted(v)
        hv = np.empty(len(v))
        hv[:-1] = 2. * np.dot(self.coeff_matrix.T, w_dz) + \
            2. * self.alpha_sq * fourth_difference(v[:-1])
        hv[-1] = 2. * w_dz.sum()
        return hv

    def hessian(self):
        '''
        Dense Hessian, (n_x, n_x), built from Hessian-vector products with
        the unit vectors. Only sensible for small grids.
        '''
        n_x = self.n_x
        x = np.zeros(n_x)
        return np.array([self.hessian_vector(x, e)
                         for e in np.identity(n_x)]).T


def solution_statistics(params, x):
    '''
    Fit statistics at x = (g, b).

    Returns
    -------
    y_soln:
        predicted signal
    residuals:
        y - y_soln
    chisq:
        weighted sum of squared residuals
    regularizer_contrib:
        ||D2 g||^2
    Valpha:
        objective value, chisq + alpha^2 * regularizer_contrib
    '''
    evaluator = ObjectiveEvaluator(params)
    y_soln = evaluator.predicted(x)
    residuals = params.data - y_soln
    chisq = np.sum(params.noise_weights * residuals**2)
    regularizer_contrib = np.sum(second_difference(x[:-1])**2)
    Valpha = chisq + params.alpha**2 * regularizer_contrib
    return y_soln, residuals, chisq, regularizer_contrib, Valpha
