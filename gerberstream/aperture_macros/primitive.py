#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright 2019 Hiroshi Murayama <opiopan@gmail.com>
# Copyright 2022 Jan Sebastian Götte <gerbonara@jaseg.de>

from dataclasses import dataclass, fields, replace, MISSING

from .expression import Expression, _normalize_binding


def _resolve(value, binding):
    return value.calculate(binding) if isinstance(value, Expression) else value


@dataclass(frozen=True, slots=True)
class Primitive:
    """ Base class of all aperture macro shape primitives. Every numeric field holds either a literal ``float`` or a
    deferred :py:class:`.Expression` of the macro's modifiers. """
    type = None
    code = None

    def substitute(self, binding):
        """ Return a copy of this primitive with all expression fields evaluated against ``binding``. """
        binding = _normalize_binding(binding)
        return replace(self, **{
                       field.name: _resolve(getattr(self, field.name), binding)
                       for field in fields(self)})

    def parameters(self):
        for field in fields(self):
            if isinstance((value := getattr(self, field.name)), Expression):
                yield from value.parameters()

    def __str__(self):
        attrs = ','.join(str(getattr(self, field.name)).strip('<>') for field in fields(self))
        return f'<{type(self).__name__} {attrs}>'

    @classmethod
    def from_arglist(kls, arglist):
        if len(arglist) < (required := sum(1 for f in fields(kls) if f.default is MISSING)):
            raise ValueError(f'{kls.__name__} aperture macro primitive needs at least {required} modifiers, '
                             f'got {len(arglist)}')
        return kls(*arglist[:len(fields(kls))])


@dataclass(frozen=True, slots=True)
class Circle(Primitive):
    type = 'circle'
    code = 1
    exposure : object
    diameter : object
    # center x/y
    x : object
    y : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class VectorLine(Primitive):
    type = 'vect'
    code = 20
    exposure : object
    width : object
    start_x : object
    start_y : object
    end_x : object
    end_y : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class CenterLine(Primitive):
    type = 'rect'
    code = 21
    exposure : object
    width : object
    height : object
    # center x/y
    x : object
    y : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class LowerLeftLine(Primitive):
    """ Deprecated, but still found in some old gerber files. """
    type = 'rectLL'
    code = 22
    exposure : object
    width : object
    height : object
    # lower left corner x/y
    x : object
    y : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class Outline(Primitive):
    type = 'outline'
    code = 4
    exposure : object
    length : object
    points : tuple
    rotation : object = 0

    @classmethod
    def from_arglist(kls, arglist):
        if len(arglist) < 4:
            raise ValueError(f'Outline aperture macro primitive needs at least 4 modifiers, got {len(arglist)}')
        exposure, length, *points, rotation = arglist
        return kls(exposure, length, tuple(points), rotation)

    def substitute(self, binding):
        binding = _normalize_binding(binding)
        return Outline(_resolve(self.exposure, binding), _resolve(self.length, binding),
                       tuple(_resolve(coord, binding) for coord in self.points),
                       _resolve(self.rotation, binding))

    def parameters(self):
        yield from Primitive.parameters(self)

        for value in self.points:
            if isinstance(value, Expression):
                yield from value.parameters()

    @property
    def vertices(self):
        for x, y in zip(self.points[0::2], self.points[1::2]):
            yield x, y

    def __str__(self):
        return f'<Outline {len(self.points)//2} points>'


@dataclass(frozen=True, slots=True)
class Polygon(Primitive):
    type = 'poly'
    code = 5
    exposure : object
    n_vertices : object
    # center x/y
    x : object
    y : object
    diameter : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class Moire(Primitive):
    """ Deprecated, but still found in some really old gerber files. """
    type = 'moire'
    code = 6
    exposure : object
    # center x/y
    x : object
    y : object
    d_outer : object
    ring_thickness : object
    ring_gap : object
    max_rings : object
    crosshair_thickness : object
    crosshair_length : object
    rotation : object = 0


@dataclass(frozen=True, slots=True)
class Thermal(Primitive):
    type = 'thermal'
    code = 7
    exposure : object
    # center x/y
    x : object
    y : object
    d_outer : object
    d_inner : object
    gap_w : object
    rotation : object = 0

@dataclass(frozen=True, slots=True)
class Comment:
    type = 'comment'
    code = 0
    comment: str

    def substitute(self, binding):
        return self


@dataclass(frozen=True, slots=True)
class VariableDefinition:
    """ ``$n=<expression>`` statement inside an aperture macro. """
    type = 'variable'
    number: int
    expression: Expression

    def apply(self, modifiers):
        """ Return a new modifier mapping with ``$n`` bound to this definition's expression evaluated under
        ``modifiers``. ``modifiers`` itself is left untouched. """
        modifiers = _normalize_binding(modifiers)
        return {**modifiers, self.number: self.expression.calculate(modifiers)}

    set = apply


PRIMITIVE_CLASSES = {
    **{cls.code: cls for cls in [
        Circle,
        VectorLine,
        CenterLine,
        LowerLeftLine,
        Outline,
        Polygon,
        Moire,
        Thermal,
    ]},
    # alternative codes
    2: VectorLine,
}
