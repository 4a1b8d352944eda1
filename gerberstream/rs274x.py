#! /usr/bin/env python
# -*- coding: utf-8 -*-
#
# Modified from parser.py by Paulo Henrique Silva <ph.silva@gmail.com>
# Copyright 2014 Hamilton Kibbe <ham@hamiltonkib.be>
# Copyright 2019 Hiroshi Murayama <opiopan@gmail.com>
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

import re

from .cam import ParserSession, normalize_coordinate_value, parse_coordinate_field, resolve_format_defaults
from .commands import SetCommand, ToolCommand, ToolDefinition, MacroCommand, LevelCommand, StepRepeat
from .commands import OperationCommand, DoneCommand
from .utils import UnknownStatementWarning, DeprecatedStatementWarning, FormatAssumptionWarning
from .aperture_macros.parse import parse_macro_body


def split_gerber_blocks(data):
    """ Split the content of a Gerber file into ``(lineno, block)`` tuples.

    Trailing ``*`` delimiters are removed. Extended (``%``) statements keep their leading ``%``. Extended statements
    containing several ``*``-separated commands are split up, except for aperture macro definitions, which are kept
    in one piece.
    """
    lineno, last = 1, 0
    # Ignore '%' signs within G04 commments because eagle likes to put completely broken file attributes inside G04
    # comments, and those contain % signs.
    for match in re.finditer(r'G04.*?\*|%.*?%|[^*%]*\*', data, re.DOTALL):
        cmd = match[0]
        start = match.start() + len(cmd) - len(cmd.lstrip())
        lineno += data.count('\n', last, start)
        last = start
        cmd = cmd.strip()

        if cmd.startswith('%'):
            body = cmd.strip('%').strip()
            if body.startswith('AM'):
                yield lineno, '%' + body.rstrip('*')
            else:
                for part in body.split('*'):
                    if (part := part.strip()):
                        yield lineno, '%' + part

        elif (cmd := cmd.rstrip('*').strip()):
            yield lineno, cmd


class GerberParser(ParserSession):
    """ Block parser for Gerber RS-274X files.

    Statements are matched against :py:attr:`STATEMENT_REGEXES` in order, and the first match wins. Blocks matching
    none of them are checked for an interpolation mode code, an operation code and a coordinate field, any combination
    of which may appear in one block.
    """

    filetype = 'gerber'

    STATEMENT_REGEXES = {
        'comment': r'G0*4',
        'eof': r'M02$',
        'region_mode': r'G3(?P<mode>[67])',
        'arc_mode': r'G7(?P<mode>[45])',
        'unit_mode': r'%MO(?P<unit>IN|MM)',
        'old_unit': r'G7(?P<mode>[01])',
        # X and Y must use the same format.
        'format_spec': r'%FS(?P<zero>[LT]?)(?P<notation>[AI]?)X(?P<integer>[0-7])(?P<decimal>[0-7])'
                       r'Y(?P=integer)(?P=decimal)',
        'load_polarity': r'%LP(?P<polarity>[CD])',
        'step_repeat': r'%SR(?:X(?P<x>\d+)Y(?P<y>\d+)I(?P<i>[\d.]+)J(?P<j>[\d.]+))?',
        'aperture': r'(?:G54)?D0*(?P<code>[1-9]\d+)',
        'aperture_definition': r'%ADD(?P<code>\d{2,})(?P<shape>[A-Za-z_]\w*)(?:,(?P<modifiers>(?:X?-?[\d.]+)*))?',
        'aperture_macro': r'%AM(?P<name>[A-Za-z_]\w*)\*?(?P<body>.*)',
        # X2 attribute values may contain things like "J1" that must not be mistaken for coordinates.
        'attribute': r'%T[FAOD]',
        'old_notation': r'G9(?P<notation>[01])$',
        }

    MODE_RE = re.compile(r'^G0*(?P<mode>[123])')
    OPERATION_RE = re.compile(r'D0*(?P<op>[123])$')
    COORD_RE = re.compile(r'(?P<coord>(?:[XYIJ][+-]?\d+){1,4})')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._regex_cache = [ (re.compile(exp, re.DOTALL), getattr(self, f'_parse_{name}'))
                             for name, exp in self.STATEMENT_REGEXES.items() ]

    split_blocks = staticmethod(split_gerber_blocks)

    def clean_block(self, block):
        return block.strip().rstrip('%').rstrip('*').strip()

    def parse_block(self, block):
        for le_regex, fun in self._regex_cache:
            if (match := le_regex.match(block)):
                fun(match)
                return

        # Extended statements never carry an operation
        if block.startswith('%') or not self._parse_operation(block):
            self.warn(f'block "{block}" was not recognized and was ignored', UnknownStatementWarning)

    def _parse_comment(self, match):
        pass

    def _parse_eof(self, match):
        self.push(DoneCommand(self.lineno))

    def _parse_region_mode(self, match):
        self.push(SetCommand(self.lineno, 'region', match['mode'] == '6'))

    def _parse_arc_mode(self, match):
        self.push(SetCommand(self.lineno, 'arc', 's' if match['mode'] == '4' else 'm'))

    def _parse_unit_mode(self, match):
        self.push(SetCommand(self.lineno, 'units', 'in' if match['unit'] == 'IN' else 'mm'))

    def _parse_old_unit(self, match):
        self.push(SetCommand(self.lineno, 'backup_units', 'in' if match['mode'] == '0' else 'mm'))

    def _parse_format_spec(self, match):
        fmt = self.format

        # An explicitly pre-set format always wins over the file's own format spec.
        if fmt.zero is None and match['zero']:
            fmt.zero = match['zero']
        if not fmt.places:
            fmt.places = int(match['integer']), int(match['decimal'])

        if fmt.zero is None:
            fmt.zero = 'L'
            self.warn('zero suppression missing from format; assuming leading', FormatAssumptionWarning)
        elif fmt.zero == 'T':
            self.warn('trailing zero suppression has been deprecated', DeprecatedStatementWarning)

        self.push(SetCommand(self.lineno, 'nota', match['notation'] or 'A'))
        self.push(SetCommand(self.lineno, 'epsilon', 1.5 * 10**-fmt.places[1]))

    def _parse_load_polarity(self, match):
        self.push(LevelCommand(self.lineno, 'polarity', match['polarity']))

    def _parse_step_repeat(self, match):
        if match['x'] is None:
            sr = StepRepeat()
        else:
            sr = StepRepeat(int(match['x']), int(match['y']), float(match['i']), float(match['j']))
        self.push(LevelCommand(self.lineno, 'stepRepeat', sr))

    def _parse_aperture(self, match):
        self.push(SetCommand(self.lineno, 'tool', match['code']))

    def _parse_aperture_definition(self, match):
        code = str(int(match['code']))
        shape = match['shape']
        args = match['modifiers'].split('X') if match['modifiers'] else []

        # Aperture dimensions always carry a decimal point or are plain integers, zero suppression does not apply.
        num = lambda index: normalize_coordinate_value(args[index] if index < len(args) else '', self.format.places)
        has_arg = lambda index: 0 <= index < len(args) and bool(args[index])

        shape, max_args = {
                'C': ('circle', 3),
                'R': ('rect', 4),
                'O': ('obround', 4),
                'P': ('poly', 5),
            }.get(shape, (shape, 0))

        if shape == 'circle':
            params = (num(0),)
        elif shape in ('rect', 'obround'):
            params = (num(0), num(1))
        elif shape == 'poly':
            params = (num(0), float(args[1]), float(args[2]) if has_arg(2) else 0)
        else: # aperture macro reference, modifiers are passed through as-is
            params = tuple(float(arg) for arg in args)

        if max_args and has_arg(max_args-1):
            hole = (num(max_args-2), num(max_args-1))
        elif max_args and has_arg(max_args-2):
            hole = (num(max_args-2),)
        else:
            hole = ()

        self.push(ToolCommand(self.lineno, code, ToolDefinition(shape, params, hole)))

    def _parse_aperture_macro(self, match):
        blocks = parse_macro_body(match['body'], warn=self.warn)
        self.push(MacroCommand(self.lineno, match['name'], blocks))

    def _parse_attribute(self, match):
        pass

    def _parse_old_notation(self, match):
        self.warn(f'Deprecated G9{match["notation"]} notation mode statement found. This deprecated since 2012.',
                  DeprecatedStatementWarning)
        self.push(SetCommand(self.lineno, 'nota', 'A' if match['notation'] == '0' else 'I'))

    def _parse_operation(self, block):
        """ Mode codes, operation codes and coordinates may all appear in the same block. """
        mode_match = self.MODE_RE.search(block)
        op_match = self.OPERATION_RE.search(block)
        coord_match = self.COORD_RE.search(block)

        if not (mode_match or op_match or coord_match):
            return False

        if mode_match:
            mode = {'1': 'i', '2': 'cw', '3': 'ccw'}[mode_match['mode']]
            self.push(SetCommand(self.lineno, 'mode', mode))

        if op_match or coord_match:
            coord = {}
            if coord_match:
                resolve_format_defaults(self.format, self.warn)
                coord = parse_coordinate_field(coord_match['coord'], self.format)

            op = {'1': 'int', '2': 'move', '3': 'flash'}.get(op_match['op'] if op_match else None, 'last')
            self.push(OperationCommand(self.lineno, op, coord))

        return True
