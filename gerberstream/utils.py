#!/usr/bin/env python
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

"""
gerberstream.utils
==================
**Gerber and drill block parsing utilities**

This module provides the warning categories and small helpers shared by the Gerber and NC drill block parsers.
"""

import re


class UnknownStatementWarning(SyntaxWarning):
    """ gerberstream found an unknown Gerber or drill statement. """
    pass


class DeprecatedStatementWarning(SyntaxWarning):
    """ gerberstream found a statement that is deprecated by the Gerber or Excellon standard, but still parsed it. """
    pass


class FormatAssumptionWarning(SyntaxWarning):
    """ The number format or zero suppression of a file was not known when it was needed, and a default was
    assumed. """
    pass


class RegexMatcher:
    """ Internal parsing helper. Handlers are tried in registration order, and the first handler whose regex matches
    wins. A handler may return :py:attr:`RegexMatcher.CONTINUE` to let the following handlers look at the same line,
    too. """

    CONTINUE = object()

    def __init__(self):
        self.mapping = []

    def match(self, regex, search=False):
        def wrapper(fun):
            nonlocal self
            self.mapping.append((re.compile(regex), search, fun))
            return fun
        return wrapper

    def handle(self, inst, line):
        handled = False
        for regex, search, handler in self.mapping:
            if (match := (regex.search(line) if search else regex.fullmatch(line))):
                handled = True
                if handler(inst, match) is not self.CONTINUE:
                    break
        return handled


_GERBER_HINTS = re.compile(r'^%(FS|MO|AD|AM|LP|TF)|^G04|D0*[123]\*', re.MULTILINE)
_DRILL_HINTS = re.compile(r'^(M48|M71|M72|INCH|METRIC|;FORMAT=|;FILE_FORMAT=|T\d+C[\d.]+)', re.MULTILINE)

def guess_filetype(data):
    """ Guess whether ``data`` is the content of a Gerber or of an NC drill file.

    :param str data: File content
    :returns: ``'gerber'``, ``'drill'`` or ``None`` if neither looks likely.
    :rtype: str
    """
    gerber_score = len(_GERBER_HINTS.findall(data))
    drill_score = len(_DRILL_HINTS.findall(data))

    if not gerber_score and not drill_score:
        return None
    return 'gerber' if gerber_score > drill_score else 'drill'
