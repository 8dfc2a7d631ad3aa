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
kernels

Kernels K(t, tau) for inversion of y(t) = integral(K(t, tau) s(tau) dtau) + b.

"Matrices" and "vectors" refer to 2 and 1-dimensional ndarrays.
'''

import numpy as np
from numpy import pi, exp

EXPONENTIAL = 'exponential'
LORENTZIAN = 'lorentzian'

# numeric selectors used by the original command-line/MATLAB interface
KERNEL_TAGS = {0 : EXPONENTIAL, 1 : LORENTZIAN}


def exponential(tau, t):
    '''
    tau : decay constant(s)
    t : observation time

    Multi-exponential decay, exp(-t / tau). Requires tau > 0.
    '''
    return exp(-t / tau)


def lorentzian(tau, t):
    '''
    tau : half width(s)
    t : observation coordinate

    Normalized Lorentzian, tau / (pi * (t**2 + tau**2)). Requires tau != 0.
    '''
    return tau / (pi * (t**2 + tau**2))


KERNEL_FUNCS = {EXPONENTIAL : exponential, LORENTZIAN : lorentzian}


def kernel_name(kernel_type):
    '''
    Translate a kernel selector (0, 1, or a name) to a canonical name.
    Returns None if the selector is not recognized.
    '''
    if isinstance(kernel_type, (int, np.integer)) and \
            not isinstance(kernel_type, bool):
        return KERNEL_TAGS.get(int(kernel_type))
    if isinstance(kernel_type, str) and kernel_type.lower() in KERNEL_FUNCS:
        return kernel_type.lower()
    return None
