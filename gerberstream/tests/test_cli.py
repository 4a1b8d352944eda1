#! /usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2023 Jan Sebastian Götte <gerbonara@jaseg.de>
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

import json

import pytest
from click.testing import CliRunner

from .. import cli


GERBER = '''G04 test file*
%FSLAX24Y24*%
%MOMM*%
%AMDONUT*1,1,$1,0,0*1,0,$1x0.5,0,0*%
%ADD10DONUT,1*%
D10*
X10000Y5000D03*
M02*
'''

DRILL = '''M48
;FORMAT={2:4/ absolute / inch / suppress leading zeros}
INCH
T1C0.0150
%
T1
X10000Y5000
M30
'''


class TestDump:
    def invoke(self, *args, expect_success=True):
        runner = CliRunner()
        res = runner.invoke(cli.cli, ['dump', *map(str, args)])
        if expect_success:
            if res.exception:
                raise res.exception
            assert res.exit_code == 0
        return res

    def test_version(self):
        assert self.invoke('--version').output.startswith('Version ')

    def test_gerber(self, tmp_path):
        infile = tmp_path / 'top.gbr'
        infile.write_text(GERBER)
        lines = [ json.loads(line) for line in self.invoke(infile).output.splitlines() ]

        assert [ line['type'] for line in lines ] == ['set', 'set', 'set', 'macro', 'tool', 'set', 'op', 'done']
        macro = lines[3]
        assert macro['name'] == 'DONUT'
        assert [ block['diameter'] for block in macro['blocks'] ] == ['$1', '$1x0.5']
        assert lines[6] == {'type': 'op', 'line': 7, 'operation': 'flash', 'location': {'x': 1.0, 'y': 0.5}}

    def test_drill(self, tmp_path):
        infile = tmp_path / 'board.drl'
        infile.write_text(DRILL)
        lines = [ json.loads(line) for line in self.invoke(infile).output.splitlines() ]

        assert lines[-2] == {'type': 'op', 'line': 7, 'operation': 'flash', 'location': {'x': 1.0, 'y': 0.5}}
        assert lines[-1] == {'type': 'done', 'line': 8}

    def test_output_file(self, tmp_path):
        infile, outfile = tmp_path / 'board.drl', tmp_path / 'out.jsonl'
        infile.write_text(DRILL)
        self.invoke(infile, outfile)
        assert len(outfile.read_text().splitlines()) == 7

    def test_explicit_filetype(self, tmp_path):
        infile = tmp_path / 'board.txt'
        infile.write_text('X0016Y0158\n')
        res = self.invoke('--filetype', 'drill', '--no-warnings', infile)
        assert json.loads(res.output) == {'type': 'op', 'line': 1, 'operation': 'flash',
                                          'location': {'x': 0.16, 'y': 1.58}}

    def test_unknown_filetype(self, tmp_path):
        infile = tmp_path / 'notes.txt'
        infile.write_text('hello world\n')
        res = self.invoke(infile, expect_success=False)
        assert res.exit_code == 2
        assert 'please pass --filetype' in res.output

    def test_syntax_error(self, tmp_path):
        infile = tmp_path / 'broken.drl'
        infile.write_text('M48\nINCH\nT1C0..1\nM30\n')
        res = self.invoke(infile, expect_success=False)
        assert res.exit_code == 1
        assert 'broken.drl:3' in res.output
