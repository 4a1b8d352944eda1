#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2014 Hamilton Kibbe <ham@hamiltonkib.be>
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
from .commands import SetCommand, ToolCommand, ToolDefinition, OperationCommand, DoneCommand
from .utils import RegexMatcher, UnknownStatementWarning


def split_drill_blocks(data):
    """ Split the content of an NC drill file into ``(lineno, block)`` tuples, one per non-empty line. """
    for lineno, line in enumerate(data.splitlines(), start=1):
        if (line := line.strip()):
            yield lineno, line


class ExcellonParser(ParserSession):
    """ Block parser for NC (Excellon) drill files, including the KiCad and Altium format hint comments. """

    filetype = 'drill'

    split_blocks = staticmethod(split_drill_blocks)

    def parse_block(self, block):
        if not self.exprs.handle(self, block):
            self.warn(f'block "{block}" was not recognized and was ignored', UnknownStatementWarning)

    exprs = RegexMatcher()

    # KiCad hint, e.g. ";FORMAT={3:3/ absolute / metric / suppress trailing zeros}"
    kicad_format_hint = re.compile(r';FORMAT=\{(.):(.)/ (absolute|.+)? / (metric|inch) /.+(trailing|leading|decimal|keep)')
    altium_format_hint = re.compile(r';FILE_FORMAT=([0-9]+):([0-9]+)')

    @exprs.match(';.*')
    def parse_comment(self, match):
        if (hint := self.kicad_format_hint.match(match[0])):
            integer, decimal, notation, unit, zeros = hint.groups()

            # "-:-" is used for decimal mode
            if integer.isdigit() and decimal.isdigit():
                self.format.places = int(integer), int(decimal)

            self.push(SetCommand(self.lineno, 'backup_nota', 'A' if notation == 'absolute' else 'I'))
            self.push(SetCommand(self.lineno, 'backup_units', 'mm' if unit == 'metric' else 'in'))

            self.format.zero = {'leading': 'L', 'keep': 'L', 'trailing': 'T'}.get(zeros, 'D')

        elif (hint := self.altium_format_hint.match(match[0])):
            self.format.places = int(hint[1]), int(hint[2])

    # We ignore parameters like feed rate or spindle speed that are not used for EDA -> CAM file transfer.
    @exprs.match(r'T0*(?P<index>\d+)(?:[FSBH][\d.]+)*C(?P<diameter>[\d.]+)', search=True)
    def parse_tooldef(self, match):
        places = self.format.places
        zero = self.format.zero if places else None
        diameter = normalize_coordinate_value(match['diameter'], places, zero)
        self.push(ToolCommand(self.lineno, match['index'], ToolDefinition('circle', (diameter,))))

    @exprs.match(r'T0*(?P<index>\d+)(?!C)', search=True)
    def parse_tool_selection(self, match):
        self.push(SetCommand(self.lineno, 'tool', match['index']))
        # A coordinate may follow on the same line
        return RegexMatcher.CONTINUE

    coord = r'(?:[XY][+-]?[\d.]+){1,2}'

    @exprs.match(fr'(?P<start>{coord})G85(?P<end>{coord})', search=True)
    def parse_slot(self, match):
        resolve_format_defaults(self.format, self.warn)
        self.push(OperationCommand(self.lineno, 'move', parse_coordinate_field(match['start'], self.format)))
        self.push(SetCommand(self.lineno, 'mode', 'i'))
        self.push(OperationCommand(self.lineno, 'int', parse_coordinate_field(match['end'], self.format)))

    @exprs.match(fr'(?P<coord>{coord})', search=True)
    def parse_drill_hit(self, match):
        resolve_format_defaults(self.format, self.warn)
        self.push(OperationCommand(self.lineno, 'flash', parse_coordinate_field(match['coord'], self.format)))

    @exprs.match('M30|M00')
    def handle_end_of_program(self, match):
        self.push(DoneCommand(self.lineno))

    def set_units(self, units):
        if not self.format.places:
            self.format.places = (2, 4) if units == 'in' else (3, 3)
        self.push(SetCommand(self.lineno, 'units', units))

    @exprs.match('M71|M72')
    def handle_unit_mode(self, match):
        self.set_units('mm' if match[0] == 'M71' else 'in')

    @exprs.match('G90|G91')
    def handle_notation(self, match):
        self.push(SetCommand(self.lineno, 'nota', 'A' if match[0] == 'G90' else 'I'))

    # Newer EasyEDA, Eagle, Fritzing and Diptrace exports append a number template like ",000.000".
    @exprs.match(r'(?P<unit>INCH|METRIC)(?:,(?P<zeros>[TL])Z)?(?:,(?P<integer>0*)\.(?P<decimal>0*))?', search=True)
    def handle_units(self, match):
        if match['integer'] is not None and not self.format.places:
            self.format.places = len(match['integer']), len(match['decimal'])

        self.set_units('mm' if match['unit'] == 'METRIC' else 'in')

        # Excellon names the zeros that are kept, so these are swapped.
        if self.format.zero is None and match['zeros']:
            self.format.zero = 'L' if match['zeros'] == 'T' else 'T'

    @exprs.match(r'M48|%|M95|G05|M15|M16|M17|M06|FMAT,?[0-9]*|VER,?[0-9]*|ICI,?(?:ON|OFF)|DETECT,ON|ATC,ON')
    def handle_ignored(self, match):
        pass
