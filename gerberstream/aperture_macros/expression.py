#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright 2021 Jan Sebastian Götte <gerbonara@jaseg.de>

from dataclasses import dataclass
import operator
import re


class MacroExpressionError(ValueError):
    """ An aperture macro expression could not be parsed. """
    pass


class MacroEvaluationError(LookupError):
    """ An aperture macro expression referenced a variable that is not bound in the given modifier mapping. """
    pass


def expr(obj):
    return obj if isinstance(obj, Expression) else ConstantExpression(obj)


def _normalize_binding(variable_binding):
    """ Accept both ``{1: 0.5}`` and ``{'$1': 0.5}`` style modifier mappings. """
    out = {}
    for key, value in variable_binding.items():
        if isinstance(key, str):
            key = int(key.lstrip('$'))
        out[key] = value
    return out


@dataclass(frozen=True, slots=True)
class Expression:
    def optimized(self, variable_binding=None):
        return self

    def __str__(self):
        return f'<{self.to_gerber()}>'

    def __repr__(self):
        return f'<E {self.to_gerber()}>'

    def calculate(self, variable_binding=None):
        """ Evaluate this expression against a mapping of macro variable numbers to values.

        :raises MacroEvaluationError: if a referenced variable is missing from ``variable_binding``.
        """
        expr = self.optimized(_normalize_binding(variable_binding or {}))
        if not isinstance(expr, ConstantExpression):
            missing = ', '.join(sorted({p.to_gerber() for p in expr.parameters()}))
            raise MacroEvaluationError(f'Cannot resolve aperture macro expression {self.to_gerber()}: unbound '
                                       f'variable(s) {missing} under parameters {variable_binding}')
        return expr.value

    def __call__(self, variable_binding=None):
        return self.calculate(variable_binding)

    def parameters(self):
        return tuple()


@dataclass(frozen=True, slots=True)
class ConstantExpression(Expression):
    value: float

    def __float__(self):
        return float(self.value)

    def to_gerber(self):
        if self.value == 0: # Avoid producing "-0" for negative floating point zeros
            return '0'
        return f'{self.value:.6f}'.rstrip('0').rstrip('.')


@dataclass(frozen=True, slots=True)
class ParameterExpression(Expression):
    ''' An expression that refers to a macro variable or parameter '''
    number: int

    def optimized(self, variable_binding=None):
        if variable_binding and self.number in variable_binding:
            return expr(float(variable_binding[self.number]))
        return self

    def to_gerber(self):
        return f'${self.number}'

    def parameters(self):
        yield self


@dataclass(frozen=True, slots=True)
class NegatedExpression(Expression):
    value: Expression

    def optimized(self, variable_binding=None):
        match self.value.optimized(variable_binding):
            # -(-x) == x
            case NegatedExpression(inner_value):
                return inner_value
            case ConstantExpression(inner_value):
                return ConstantExpression(-inner_value)
            case x:
                return NegatedExpression(x)

    def to_gerber(self):
        val_str = self.value.to_gerber()
        if isinstance(self.value, (ConstantExpression, ParameterExpression)):
            return f'-{val_str}'
        else:
            return f'-({val_str})'

    def parameters(self):
        yield from self.value.parameters()


_OPERATORS = {
        '+': operator.add,
        '-': operator.sub,
        'x': operator.mul,
        'X': operator.mul,
        '/': operator.truediv,
    }


@dataclass(frozen=True, slots=True)
class OperatorExpression(Expression):
    op: object
    l: Expression
    r: Expression

    def __init__(self, op, l, r):
        object.__setattr__(self, 'op', op)
        object.__setattr__(self, 'l', expr(l))
        object.__setattr__(self, 'r', expr(r))

    def optimized(self, variable_binding=None):
        l = self.l.optimized(variable_binding)
        r = self.r.optimized(variable_binding)

        match (l, r):
            case (ConstantExpression(), ConstantExpression()):
                return ConstantExpression(self.op(float(l), float(r)))
            case _:
                return OperatorExpression(self.op, l, r)

    def to_gerber(self):
        lval = self.l.to_gerber()
        rval = self.r.to_gerber()

        # Evaluation is strictly left to right, so only a compound right hand side needs parentheses.
        if isinstance(self.r, OperatorExpression):
            rval = f'({rval})'

        op = {operator.add: '+',
              operator.sub: '-',
              operator.mul: 'x',
              operator.truediv: '/'} [self.op]

        return f'{lval}{op}{rval}'

    def parameters(self):
        yield from self.l.parameters()
        yield from self.r.parameters()


_TOKEN_RE = re.compile(r'\s*(?:(?P<number>[0-9]*\.?[0-9]+\.?)|\$(?P<variable>[0-9]+)|(?P<op>[-+xX/])|(?P<paren>[()]))')

def _tokenize(text):
    pos, tokens = 0, []
    text = text.rstrip()
    while pos < len(text):
        if not (match := _TOKEN_RE.match(text, pos)):
            raise MacroExpressionError(f'Invalid aperture macro expression {text!r}: unexpected {text[pos:]!r}')
        tokens.append((match.lastgroup, match[match.lastgroup]))
        pos = match.end()
    return tokens


class _ExpressionParser:
    """ Recursive descent parser for the aperture macro arithmetic micro-language.

    Binary operators have no precedence among each other: ``1+2x3`` folds left to right into ``(1+2)x3``. A term is
    an optionally signed number, an optionally signed ``$n`` variable reference, or a parenthesized sub-expression.
    """

    def __init__(self, text, warn=None):
        self.text = text
        self.warn = warn
        self.tokens = _tokenize(text)
        self.pos = 0

    def fail(self, msg):
        raise MacroExpressionError(f'Invalid aperture macro expression {self.text!r}: {msg}')

    def peek(self):
        return self.tokens[self.pos] if self.pos < len(self.tokens) else (None, None)

    def take(self):
        token = self.peek()
        self.pos += 1
        return token

    def parse(self):
        if not self.tokens:
            self.fail('empty expression')

        rv = self.expression()
        if self.pos != len(self.tokens):
            self.fail(f'unexpected {self.peek()[1]!r}')
        return rv

    def expression(self):
        rv = self.term()
        while self.peek()[0] == 'op':
            _kind, op = self.take()
            if op == 'X' and self.warn:
                self.warn("multiplication in macros should use 'x', not 'X'")
            rv = OperatorExpression(_OPERATORS[op], rv, self.term())
        return rv

    def term(self):
        kind, value = self.take()

        if kind == 'op' and value in '+-':
            inner = self.term()
            return NegatedExpression(inner) if value == '-' else inner

        elif kind == 'number':
            return ConstantExpression(float(value))

        elif kind == 'variable':
            return ParameterExpression(int(value))

        elif kind == 'paren' and value == '(':
            rv = self.expression()
            if self.take() != ('paren', ')'):
                self.fail('unbalanced parentheses')
            return rv

        elif kind is None:
            self.fail('expression ends with an operator')

        else:
            self.fail(f'unexpected {value!r}')


def parse_expression(text, warn=None):
    """ Parse an aperture macro modifier expression such as ``$1x0.5+$2`` into a deferred evaluator.

    The returned :py:class:`Expression` is immutable and holds no reference to the parser, so it can be evaluated any
    number of times against different modifier mappings via :py:meth:`Expression.calculate`.

    :param str text: Expression source text
    :param warn: Optional callable taking a warning message string
    :raises MacroExpressionError: if ``text`` is not a valid expression.
    """
    return _ExpressionParser(text, warn).parse()
