#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2022 Jan Sebastian Götte <code@jaseg.de>
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

"""
gerberstream
============

gerberstream decodes PCB fabrication data in Gerber/RS274-X and NC (Excellon) drill format into a stream of typed
commands. A parser session is fed one logical block at a time and produces state changes, tool and aperture macro
definitions, and geometric operations, leaving the interpretation of these commands to the consumer.
"""

from .cam import FormatState, ParserSession, ParseWarning, ParseError
from .rs274x import GerberParser, split_gerber_blocks
from .excellon import ExcellonParser, split_drill_blocks
from .commands import SetCommand, ToolCommand, ToolDefinition, MacroCommand, LevelCommand, StepRepeat
from .commands import OperationCommand, DoneCommand
from .aperture_macros.expression import parse_expression, MacroExpressionError, MacroEvaluationError
from .utils import guess_filetype

__version__ = '0.3.0'
