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
serialize

Save and load inversion inputs and results as YAML.

Any subclass of Serializable is written with a tag named after the class
(e.g. !ContinInputs), so a saved file can be loaded back into the right
object. ndarrays are written as plain nested lists under an !ndarray tag.
'''

import numpy as np
import yaml


class SerializableMetaclass(yaml.YAMLObjectMetaclass):
    def __init__(cls, name, bases, kwds):
        super(SerializableMetaclass, cls).__init__(name, bases, kwds)
        cls.yaml_tag = '!{0}'.format(name)
        for loader in cls.yaml_loader:
            loader.add_constructor(cls.yaml_tag, cls.from_yaml)
        cls.yaml_dumper.add_representer(cls, cls.to_yaml)


class Serializable(yaml.YAMLObject, metaclass = SerializableMetaclass):
    '''
    Base class for objects that can be round-tripped through YAML.

    State is the instance __dict__; __init__ is not called on load.
    '''
    yaml_loader = [yaml.Loader, yaml.FullLoader, yaml.UnsafeLoader]
    yaml_dumper = yaml.Dumper

    def __repr__(self):
        keywpairs = ['{0}={1!r}'.format(k, v) for k, v in
                     self.__dict__.items()]
        return '{0}({1})'.format(self.__class__.__name__, ', '.join(keywpairs))


def _ndarray_representer(dumper, data):
    if data.ndim == 0:
        return dumper.represent_data(data.item())
    return dumper.represent_sequence('!ndarray', data.tolist())

def _ndarray_constructor(loader, node):
    return np.array(loader.construct_sequence(node, deep = True))

def _numpy_scalar_representer(dumper, data):
    return dumper.represent_data(data.item())

yaml.add_representer(np.ndarray, _ndarray_representer)
yaml.add_multi_representer(np.generic, _numpy_scalar_representer)
yaml.add_constructor('!ndarray', _ndarray_constructor)


def save(outf, obj):
    '''
    Write obj to outf as YAML. outf may be a filename or an open file.
    '''
    if isinstance(outf, str):
        with open(outf, 'w') as f:
            yaml.dump(obj, f, default_flow_style = False)
    else:
        yaml.dump(obj, outf, default_flow_style = False)


def load(inf):
    '''
    Load an object saved with save(). inf may be a filename or an open
    file.
    '''
    if isinstance(inf, str):
        with open(inf) as f:
            return yaml.load(f, Loader = yaml.FullLoader)
    return yaml.load(inf, Loader = yaml.FullLoader)
