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

import pytest

from ..cam import FormatState, normalize_coordinate_value, parse_coordinate_field, resolve_format_defaults


def test_zero_suppression():
    test_cases = [
        ("1", 0.00001),
        ("10", 0.0001),
        ("100", 0.001),
        ("1000", 0.01),
        ("10000", 0.1),
        ("100000", 1.0),
        ("1000000", 10.0),
        ("0", 0.0),
    ]
    for string, value in test_cases:
        assert normalize_coordinate_value(string, (2, 5), 'L') == value

    test_cases = [
        ("1", 10.0),
        ("01", 1.0),
        ("001", 0.1),
        ("0001", 0.01),
        ("00001", 0.001),
        ("000001", 0.0001),
        ("0000001", 0.00001),
        ("0", 0.0),
    ]
    for string, value in test_cases:
        assert normalize_coordinate_value(string, (2, 5), 'T') == value


def test_format():
    test_cases = [
        ((2, 7), "1", 0.0000001),
        ((2, 6), "1", 0.000001),
        ((2, 5), "1", 0.00001),
        ((2, 4), "1", 0.0001),
        ((2, 3), "1", 0.001),
        ((2, 2), "1", 0.01),
        ((2, 1), "1", 0.1),
        ((2, 6), "0", 0),
    ]
    for places, string, value in test_cases:
        assert normalize_coordinate_value(string, places, 'L') == value

    test_cases = [
        ((6, 5), "1", 100000.0),
        ((5, 5), "1", 10000.0),
        ((4, 5), "1", 1000.0),
        ((3, 5), "1", 100.0),
        ((2, 5), "1", 10.0),
        ((1, 5), "1", 1.0),
        ((2, 5), "0", 0),
    ]
    for places, string, value in test_cases:
        assert normalize_coordinate_value(string, places, 'T') == value


@pytest.mark.parametrize('value,places,zero,expected', [
    ('0016', (2, 4), 'T', 0.16),
    ('-01795', (2, 4), 'T', -1.795),
    ('+0108', (2, 4), 'T', 1.08),
    ('08', (3, 3), 'T', 80.0),
    ('50', (2, 4), 'L', 0.005),
    ('-3300', (2, 4), 'L', -0.33),
    ('7550', (3, 3), 'L', 7.55),
    ('0.7550', (2, 4), 'L', 0.755),
    ('-1.4', (2, 4), 'T', -1.4),
    ('12.5', (), None, 12.5),
    ('25', (), None, 25.0),
    ('0.015', (3, 3), 'D', 0.015),
    ('15', (3, 3), 'D', 15.0),
    ])
def test_normalize_coordinate_value(value, places, zero, expected):
    assert normalize_coordinate_value(value, places, zero) == pytest.approx(expected)


@pytest.mark.parametrize('places', [(2, 4), (3, 3), (2, 5), (4, 4), (1, 6)])
@pytest.mark.parametrize('digits', ['1', '12', '0050', '123456', '007', '9', '100'])
def test_normalize_inverse(places, digits):
    integer, decimal = places
    if len(digits) > integer + decimal:
        pytest.skip('more digits than the format has room for')

    value = normalize_coordinate_value(digits, places, 'L')
    assert round(value * 10**decimal) == int(digits)

    value = normalize_coordinate_value(digits, places, 'T')
    assert round(value * 10**decimal) == int(digits.ljust(integer + decimal, '0'))


@pytest.mark.parametrize('value,places,zero', [
    ('', (2, 4), 'L'),
    ('-', (2, 4), 'L'),
    ('12a4', (2, 4), 'T'),
    ('1.2.3', (2, 4), 'T'),
    ('0016', (), 'T'),
    ])
def test_normalize_invalid(value, places, zero):
    with pytest.raises(ValueError):
        normalize_coordinate_value(value, places, zero)


def test_parse_coordinate_field():
    fmt = FormatState(places=(2, 4), zero='T')
    assert parse_coordinate_field('X0016Y0158', fmt) == {'x': 0.16, 'y': 1.58}
    assert parse_coordinate_field('Y-0108', fmt) == {'y': -1.08}
    assert parse_coordinate_field('X01Y01I005J-005', fmt) == {'x': 1.0, 'y': 1.0, 'i': 0.5, 'j': -0.5}
    assert parse_coordinate_field('', fmt) == {}


def test_format_state_validation():
    fmt = FormatState()
    assert fmt.places == ()
    assert fmt.zero is None

    fmt.places = [3, 3]
    assert fmt.places == (3, 3)

    for attr, value in [
            ('places', (2,)),
            ('places', (2, -1)),
            ('places', ('2', '4')),
            ('zero', 'X'),
            ('units', 'mil'),
            ('backup_units', 'cm'),
            ('nota', 'R'),
            ('backup_nota', 'absolute'),
            ('arc', 'x'),
            ('mode', 'line')]:
        with pytest.raises(ValueError):
            setattr(fmt, attr, value)

    fmt.zero = 'D'
    fmt.units = 'mm'
    fmt.tool = '12'
    assert (fmt.zero, fmt.units, fmt.tool) == ('D', 'mm', '12')


def test_format_state_copy():
    fmt = FormatState(places=(2, 4), zero='L')
    copy = fmt.copy()
    copy.zero = 'T'
    assert fmt.zero == 'L'
    assert copy.places == (2, 4)


@pytest.mark.parametrize('places,zero,message', [
    ((), None, 'zero suppression and places format missing; assuming trailing suppression and [2, 4]'),
    ((2, 4), None, 'zero suppression missing; assuming trailing suppression'),
    ((), 'L', 'places format missing; assuming [2, 4]'),
    ])
def test_resolve_format_defaults(places, zero, message):
    fmt = FormatState(places=places, zero=zero)
    warnings = []
    resolve_format_defaults(fmt, lambda msg, kls=None: warnings.append(msg))

    assert warnings == [message]
    assert fmt.places == (places or (2, 4))
    assert fmt.zero == (zero or 'T')

    resolve_format_defaults(fmt, lambda msg, kls=None: warnings.append(msg))
    assert len(warnings) == 1


def test_resolve_format_defaults_keeps_known_values():
    fmt = FormatState(places=(3, 3), zero='L')
    warnings = []
    resolve_format_defaults(fmt, lambda msg, kls=None: warnings.append(msg))
    assert warnings == []
    assert fmt.places == (3, 3)
    assert fmt.zero == 'L'
