#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2022 Jan Sebastian Götte <gerbonara@jaseg.de>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .aperture_macros.expression import Expression
from .aperture_macros.primitive import VariableDefinition, Comment


@dataclass(frozen=True, slots=True)
class Command:
    """ Base class of everything the Gerber and drill block parsers emit.

    :ivar line: 1-based line number of the block that produced this command.
    """
    type = None
    line : int

    def to_dict(self):
        """ Convert this command into a JSON-serializable dict. Macro expressions are rendered back into their Gerber
        text representation. """
        return _jsonable(self)


@dataclass(frozen=True, slots=True)
class SetCommand(Command):
    """ Scalar state change. ``prop`` is the name of the :py:class:`.FormatState` field that changes, one of
    ``units``, ``backup_units``, ``nota``, ``backup_nota``, ``mode``, ``arc``, ``region``, ``tool`` or ``epsilon``. """
    type = 'set'
    prop : str
    value : object


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    #: ``'circle'``, ``'rect'``, ``'obround'``, ``'poly'`` or the name of an aperture macro
    shape : str
    #: Geometric parameters. Normalized numbers for the standard shapes, raw numbers for macro apertures.
    params : tuple = ()
    #: ``()``, ``(diameter,)`` for a round hole or ``(width, height)`` for a rectangular hole
    hole : tuple = ()


@dataclass(frozen=True, slots=True)
class ToolCommand(Command):
    """ Aperture or drill tool definition. ``code`` is the tool number as a string without leading zeros. """
    type = 'tool'
    code : str
    definition : ToolDefinition

    @property
    def is_macro(self):
        return self.definition.shape not in ('circle', 'rect', 'obround', 'poly')


@dataclass(frozen=True, slots=True)
class MacroCommand(Command):
    type = 'macro'
    name : str
    blocks : tuple = ()

    def evaluate(self, modifiers=None):
        """ Instantiate this macro with the given modifiers.

        Variable definitions are replayed in source order, then every shape primitive is resolved to concrete numbers.

        :param modifiers: Mapping of modifier number to value, e.g. ``{1: 0.5, 2: 0.25}``. For an aperture defined as
                          ``%ADD10NAME,0.5X0.25*%`` this is ``dict(enumerate(tool.definition.params, start=1))``.
        :returns: list of primitives with all fields resolved to floats.
        :raises .MacroEvaluationError: if a primitive uses a variable that is neither passed in nor defined.
        """
        if modifiers is None:
            modifiers = {}

        for block in self.blocks:
            if isinstance(block, VariableDefinition):
                modifiers = block.apply(modifiers)

        return [ block.substitute(modifiers) for block in self.blocks
                if not isinstance(block, (VariableDefinition, Comment)) ]


@dataclass(frozen=True, slots=True)
class StepRepeat:
    x : int = 1
    y : int = 1
    i : float = 0
    j : float = 0


@dataclass(frozen=True, slots=True)
class LevelCommand(Command):
    """ Non-scalar state change. ``kind`` is ``'polarity'`` with a value of ``'C'`` or ``'D'``, or ``'stepRepeat'``
    with a :py:class:`StepRepeat` value. """
    type = 'level'
    kind : str
    value : object


@dataclass(frozen=True, slots=True)
class OperationCommand(Command):
    """ Geometric operation. ``operation`` is one of ``'flash'``, ``'move'``, ``'int'`` or ``'last'``.

    ``location`` only contains the axes (``x``, ``y``, ``i``, ``j``) actually given in the block. Missing axes carry
    over from the previous position, which is the consumer's job to track. ``'last'`` likewise means "repeat the
    previous operation" and is left to the consumer to resolve.

    ``location`` is read-only.
    """
    type = 'op'
    operation : str
    location : dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'location', MappingProxyType(dict(self.location)))


@dataclass(frozen=True, slots=True)
class DoneCommand(Command):
    type = 'done'


def _jsonable(value):
    if isinstance(value, Expression):
        return value.to_gerber()

    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {'type': value.type} if getattr(value, 'type', None) else {}
        out.update({f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)})
        return out

    elif isinstance(value, (list, tuple)):
        return [ _jsonable(elem) for elem in value ]

    elif isinstance(value, Mapping):
        return { key: _jsonable(elem) for key, elem in value.items() }

    else:
        return value
