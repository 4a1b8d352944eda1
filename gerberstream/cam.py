#! /usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2014 Hamilton Kibbe <ham@hamiltonkib.be>
# Copyright 2022 Jan Götte <code@jaseg.de>
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

import re
import warnings
from copy import deepcopy
from dataclasses import dataclass
from types import MappingProxyType

from .commands import SetCommand, ToolCommand, MacroCommand
from .utils import FormatAssumptionWarning


@dataclass
class FormatState:
    ''' Per-job coordinate format and scalar state of a parsing session.

    .. note::
        Zero suppression uses the Gerber convention: ``'L'`` means leading zeros are *suppressed*. Excellon files
        name the zeros that are *kept*, so an Excellon ``METRIC,LZ`` header results in ``zero='T'``.
    '''
    #: ``(integer_digits, decimal_digits)`` tuple, or ``()`` while still unknown.
    places : tuple = ()
    #: Zero suppression. ``'L'`` (leading), ``'T'`` (trailing), ``'D'`` (explicit decimal point) or ``None``.
    zero : str = None
    #: ``'in'``, ``'mm'`` or ``None``
    units : str = None
    #: Units from a legacy ``G70``/``G71`` statement or a format hint comment.
    backup_units : str = None
    #: Coordinate notation, ``'A'`` (absolute) or ``'I'`` (incremental).
    nota : str = None
    #: Notation from a format hint comment.
    backup_nota : str = None
    #: Arc quadrant mode, ``'s'`` (single, G74) or ``'m'`` (multi, G75).
    arc : str = None
    #: ``True`` between G36 and G37.
    region : bool = False
    #: Currently selected tool code.
    tool : str = None
    #: Interpolation mode, ``'i'`` (linear), ``'cw'`` or ``'ccw'``.
    mode : str = None
    #: Numeric tolerance derived from the number of decimal places.
    epsilon : float = None

    # input validation
    def __setattr__(self, name, value):
        if name == 'places':
            value = tuple(value)
            if len(value) not in (0, 2) or not all(isinstance(x, int) and x >= 0 for x in value):
                raise ValueError(f'places must be an (integer, decimal) tuple of non-negative ints, not {value}')
        elif name == 'zero' and value not in (None, 'L', 'T', 'D'):
            raise ValueError(f'zero must be either "L", "T", "D" or None, not {value}')
        elif name in ('units', 'backup_units') and value not in (None, 'in', 'mm'):
            raise ValueError(f'{name} must be either "in", "mm" or None, not {value}')
        elif name in ('nota', 'backup_nota') and value not in (None, 'A', 'I'):
            raise ValueError(f'{name} must be either "A", "I" or None, not {value}')
        elif name == 'arc' and value not in (None, 's', 'm'):
            raise ValueError(f'arc must be either "s", "m" or None, not {value}')
        elif name == 'mode' and value not in (None, 'i', 'cw', 'ccw'):
            raise ValueError(f'mode must be either "i", "cw", "ccw" or None, not {value}')

        super().__setattr__(name, value)

    def copy(self):
        return deepcopy(self)

    def __str__(self):
        return f'<Format state: units={self.units} zero={self.zero} places={self.places}>'


def normalize_coordinate_value(value, places=(), zero=None):
    """ Convert a raw numeric field into a float.

    A value containing a decimal point is always read literally, as is any value when ``zero`` is ``None`` or ``'D'``.
    Otherwise the digits are padded to ``integer_digits + decimal_digits`` according to the zero suppression mode:
    on the left for leading suppression (``'L'``), on the right for trailing suppression (``'T'``).

    :param str value: e.g. ``'-01795'`` or ``'0.015'``
    :param tuple places: ``(integer_digits, decimal_digits)``
    :param str zero: ``'L'``, ``'T'``, ``'D'`` or ``None``
    :raises ValueError: if ``value`` is not a number.
    :rtype: float
    """
    if not value:
        raise ValueError('Missing numeric value')

    sign, digits = '', value
    if value[0] in '+-':
        sign, digits = value[0], value[1:]

    if '.' in digits or zero in (None, 'D'):
        return float(sign + digits)

    if not re.fullmatch('[0-9]+', digits):
        raise ValueError(f'Invalid coordinate value "{value}"')

    if len(places) != 2:
        raise ValueError(f'Cannot read coordinate value "{value}" without a known number format')
    integer_digits, decimal_digits = places

    if zero == 'L':
        magnitude = int(digits) / 10**decimal_digits

    else: # trailing zero suppression
        digits = digits.ljust(integer_digits + decimal_digits, '0')
        magnitude = int(digits) / 10**(len(digits) - integer_digits)

    return -magnitude if sign == '-' else magnitude


COORDINATE_FIELD = re.compile(r'([XYIJ])([+-]?[0-9.]+)')

def parse_coordinate_field(field, format):
    """ Split a coordinate field like ``X0016Y-0158`` into a ``{'x': 0.16, 'y': -1.58}`` dict using the number format
    of ``format`` (a :py:class:`FormatState`). Axes not present in the field are not present in the result. """
    if not field:
        return {}

    return { axis.lower(): normalize_coordinate_value(value, format.places, format.zero)
            for axis, value in COORDINATE_FIELD.findall(field) }


def resolve_format_defaults(format, warn):
    """ Make sure ``format.places`` and ``format.zero`` are known before the first coordinate is read. Missing values
    default to ``(2, 4)`` and ``'T'``, and exactly one warning is issued naming what was assumed. """
    missing_zero, missing_places = format.zero is None, not format.places

    if missing_zero and missing_places:
        warn('zero suppression and places format missing; assuming trailing suppression and [2, 4]',
             FormatAssumptionWarning)
    elif missing_zero:
        warn('zero suppression missing; assuming trailing suppression', FormatAssumptionWarning)
    elif missing_places:
        warn('places format missing; assuming [2, 4]', FormatAssumptionWarning)

    if missing_zero:
        format.zero = 'T'
    if missing_places:
        format.places = (2, 4)


@dataclass(frozen=True)
class ParseWarning:
    lineno : int
    message : str

    def __str__(self):
        return f'line {self.lineno}: {self.message}'


@dataclass(frozen=True)
class ParseError:
    lineno : int
    message : str
    fatal : bool = True

    def __str__(self):
        return f'line {self.lineno}: {self.message}'


class ParserSession:
    """ Common base class of :py:class:`.GerberParser` and :py:class:`.ExcellonParser`.

    A session is fed one logical block at a time through :py:meth:`feed`. Every block is parsed to completion, and the
    resulting commands are appended to :py:attr:`commands`, passed to the ``on_command`` callback, and returned.

    :ivar format: :py:class:`FormatState` of this job. May be pre-seeded before the first block.
    :ivar commands: List of all commands produced so far.
    :ivar warnings: List of :py:class:`ParseWarning` for all recoverable problems found so far.
    :ivar errors: List of :py:class:`ParseError`. Contains at most one entry, since a fatal error ends the session.
    """

    filetype = None

    @classmethod
    def for_filetype(kls, filetype, **kwargs):
        """ Create a new session for the given file type.

        :param str filetype: ``'gerber'`` or ``'drill'``
        :param kwargs: passed through to the parser's constructor.
        :raises ValueError: for any other file type.
        """
        for parser in kls.__subclasses__():
            if parser.filetype == filetype:
                return parser(**kwargs)
        raise ValueError(f'Unknown file type "{filetype}", must be either "gerber" or "drill"')

    def __init__(self, format=None, filename=None, on_command=None, on_warning=None, on_error=None):
        self.format = format if format is not None else FormatState()
        self.filename = filename or '<unknown>'
        self.on_command = on_command
        self.on_warning = on_warning
        self.on_error = on_error
        self.commands = []
        self.warnings = []
        self.errors = []
        self._tools = {}
        self._macros = {}
        self._emitted = []
        self.failed = False
        self.lineno = 0
        self.line = ''

    @property
    def tools(self):
        """ Read-only ``{code: ToolCommand}`` mapping of all tools defined so far. """
        return MappingProxyType(self._tools)

    @property
    def macros(self):
        """ Read-only ``{name: MacroCommand}`` mapping of all aperture macros defined so far. """
        return MappingProxyType(self._macros)

    def _shorten_line(self):
        line_joined = self.line.replace('\r', '').replace('\n', '\\n')
        if len(line_joined) > 80:
            return f'{line_joined[:20]}[...]{line_joined[-20:]}'
        else:
            return line_joined

    def warn(self, msg, kls=SyntaxWarning):
        warning = ParseWarning(self.lineno, msg)
        self.warnings.append(warning)

        if self.on_warning is not None:
            self.on_warning(warning)
        else:
            warnings.warn(f'{self.filename}:{self.lineno} "{self._shorten_line()}": {msg}', kls)

    def push(self, command):
        if isinstance(command, SetCommand):
            setattr(self.format, command.prop, command.value)
        elif isinstance(command, ToolCommand):
            self._tools[command.code] = command
        elif isinstance(command, MacroCommand):
            self._macros[command.name] = command

        self.commands.append(command)
        self._emitted.append(command)
        if self.on_command is not None:
            self.on_command(command)

    def clean_block(self, block):
        return block.strip()

    def parse_block(self, block):
        raise NotImplementedError()

    def feed(self, block, lineno=None):
        """ Parse one logical block.

        :param str block: Block text, e.g. ``X0016Y0158`` or ``%FSLAX24Y24*%``
        :param int lineno: 1-based source line number. Defaults to the previous block's line number plus one.
        :returns: list of commands produced by this block.
        :raises SyntaxError: on a fatal error. The session refuses any further input afterwards.
        """
        if self.failed:
            raise SyntaxError(f'{self.filename}: parser session was aborted by a fatal error on line '
                              f'{self.errors[-1].lineno}, refusing further input.')

        self.lineno = self.lineno + 1 if lineno is None else lineno
        self.line = block = self.clean_block(block)
        self._emitted = []
        if not block:
            return []

        try:
            self.parse_block(block)
        except Exception as e:
            message = f'{self.filename}:{self.lineno} "{self._shorten_line()}": {e}'
            error = ParseError(self.lineno, message)
            self.errors.append(error)
            self.failed = True
            if self.on_error is not None:
                self.on_error(error)
            raise SyntaxError(message) from e

        return self._emitted

    write = feed

    def parse(self, blocks):
        """ Pull-style interface: parse an iterable of ``(lineno, block)`` tuples or bare block strings, yielding the
        resulting commands in order. """
        for item in blocks:
            if isinstance(item, str):
                yield from self.feed(item)
            else:
                lineno, block = item
                yield from self.feed(block, lineno)

    def parse_text(self, data):
        """ Split the content of a whole file into blocks, then parse them like :py:meth:`parse`. """
        yield from self.parse(self.split_blocks(data))

    @staticmethod
    def split_blocks(data):
        raise NotImplementedError()
