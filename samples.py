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
"""
Container for observed data to be inverted.

.. moduleauthor:: Jerome Fung <jfung@brandeis.edu>
"""
import numpy as np

from serialize import Serializable


class SampleSet(Serializable):
    """
    Observed samples y(t) with their variances.

    Parameters
    ----------
    t : array_like
        Observation times (or other independent coordinate)
    y : array_like
        Observed values at t
    variance : array_like, optional
        Variance of each y.  Used as an inverse weight in the fit.
        Default: 1 for every sample.

    Notes
    -----
    No checks are made here; lengths and positivity of the variances are
    validated when the inversion problem is set up.
    """
    def __init__(self, t, y, variance = None):
        self.t = np.asarray(t, dtype = float)
        self.y = np.asarray(y, dtype = float)
        if variance is None:
            self.variance = np.ones_like(self.t)
        else:
            self.variance = np.asarray(variance, dtype = float)

    def __len__(self):
        return len(self.t)

    def trimmed_t(self, tmin = -np.inf, tmax = np.inf):
        '''
        Returns trimmed version of samples, eliminating times
        less than or equal to tmin and greater than or equal to tmax.
        '''
        condition = (self.t > tmin) * (self.t < tmax)
        return SampleSet(self.t[condition], self.y[condition],
                         self.variance[condition])
