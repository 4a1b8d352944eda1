#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright 2021 Jan Sebastian Götte <gerbonara@jaseg.de>

import re

from . import primitive as ap
from .expression import parse_expression
from ..utils import DeprecatedStatementWarning, UnknownStatementWarning


_EXPRESSION_CHARS = re.compile(r'[$+\-/xX]')
_VARIABLE_DEFINITION = re.compile(r'\$([0-9]+)=(.+)')


def _parse_modifier(value, warn=None):
    """ Map a primitive modifier to a float or, if it is an expression, to a deferred :py:class:`.Expression`. """
    if _EXPRESSION_CHARS.search(value):
        return parse_expression(value, warn)
    return float(value)


def parse_primitive_block(block, warn=None):
    """ Parse one ``*``-delimited statement of an aperture macro body.

    :param str block: Statement text, e.g. ``1,1,$1,0,0`` or ``$3=$1x2``
    :param warn: Callable taking a warning message and an optional warning category. Used for deprecated and unknown
                 primitives.
    :returns: A primitive, :py:class:`.Comment` or :py:class:`.VariableDefinition`, or ``None`` if the primitive code
              is not known.
    :raises ValueError: if a modifier is neither a number nor a valid expression.
    """
    warn = warn or (lambda msg, kls=None: None)

    if block.startswith('0'): # comment
        return ap.Comment(block[1:].strip())

    block = re.sub(r'\s', '', block)

    if (match := _VARIABLE_DEFINITION.fullmatch(block)):
        return ap.VariableDefinition(int(match[1]), parse_expression(match[2], warn))

    code, *args = block.split(',')
    code = int(code)
    args = [ _parse_modifier(arg, warn) for arg in args ]

    if code == 2:
        warn('macro aperture vector primitives with code 2 are deprecated', DeprecatedStatementWarning)

    elif code == 22:
        warn('macro aperture lower-left rectangle primitives are deprecated', DeprecatedStatementWarning)

    if (kls := ap.PRIMITIVE_CLASSES.get(code)) is None:
        warn(f'{code} is an unrecognized primitive for a macro aperture', UnknownStatementWarning)
        return None

    return kls.from_arglist(args)


def parse_macro_body(body, warn=None):
    """ Split an aperture macro body on ``*`` and parse every statement in it, skipping empty statements and
    primitives with unknown codes. """
    blocks = []
    for block in body.split('*'):
        if not (block := block.strip()):
            continue

        if (parsed := parse_primitive_block(block, warn)) is not None:
            blocks.append(parsed)
    return tuple(blocks)
