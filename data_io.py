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
data_io

Read samples from, and write solutions to, whitespace-delimited text.
'''

import logging

import numpy as np

from contin_core import InvalidDimension
from samples import SampleSet

logger = logging.getLogger(__name__)


def load_samples(filename):
    '''
    Load samples from a text file with columns t, y and optionally the
    variance of y. Without a variance column every variance is 1.
    '''
    data = np.loadtxt(filename, ndmin = 2)
    if data.shape[1] not in (2, 3):
        raise InvalidDimension('{0}: expected 2 or 3 columns, found '
                               '{1}'.format(filename, data.shape[1]))
    return SampleSet(*data.transpose())


def save_columns(x, y, filename):
    '''
    Write x and y as two tab-separated columns.
    '''
    np.savetxt(filename, np.column_stack((x, y)), fmt = '%f',
               delimiter = '\t')


def save_result(result, filename):
    '''
    Write the spectral function (tau, s) of an InversionResult. The offset
    is not part of the table; it is logged and returned.
    '''
    save_columns(result.grid, result.amplitudes, filename)
    logger.info('Saved %d grid points to %s; offset b = %g',
                len(result.grid), filename, result.offset)
    return result.offset
