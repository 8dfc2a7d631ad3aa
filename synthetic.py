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
synthetic

Simulated data for testing inversions.
'''

import numpy as np
from numpy import exp

from samples import SampleSet


def multi_exponential(intensities, decay_constants, n_pts, t0, tend,
                      noise_sigma = 0., seed = None):
    '''
    Sample y(t) = sum_k intensities[k] * exp(-t / decay_constants[k])
    at n_pts equally spaced times on [t0, tend].

    Variances are 1. If noise_sigma > 0, Gaussian noise of that standard
    deviation is added to y.
    '''
    intensities = np.asarray(intensities, dtype = float)
    decay_constants = np.asarray(decay_constants, dtype = float)
    tbase = np.linspace(t0, tend, n_pts)

    y = np.zeros(n_pts)
    for intensity, tau in zip(intensities, decay_constants):
        y += intensity * exp(-tbase / tau)

    if noise_sigma > 0:
        rng = np.random.default_rng(seed)
        y = y + noise_sigma * rng.standard_normal(n_pts)

    return SampleSet(tbase, y, np.ones(n_pts))
