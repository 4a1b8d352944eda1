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
from pathlib import Path

import click

from .cam import ParserSession
from .utils import guess_filetype
from . import __version__


def _print_version(ctx, param, value):
    if value and not ctx.resilient_parsing:
        click.echo(f'Version {__version__}')
        ctx.exit()


@click.group()
@click.option('--version', is_flag=True, callback=_print_version, expose_value=False, is_eager=True)
def cli():
    """ The gerberstream command line interface decodes Gerber and NC drill files into a stream of JSON commands. """
    pass


@cli.command()
@click.option('--version', is_flag=True, callback=_print_version, expose_value=False, is_eager=True)
@click.option('-t', '--filetype', type=click.Choice(['gerber', 'drill']), help='''Input file type. Default: guess
              from file contents.''')
@click.option('--warnings/--no-warnings', 'show_warnings', default=True, help='''Print (default) or hide file format
              warnings on stderr during parsing''')
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output', required=False, default='-', type=click.File('w'))
def dump(input_file, output, filetype, show_warnings):
    """ Parse a Gerber or NC drill file and print one JSON object per command. """

    data = input_file.read_text(errors='replace')
    if filetype is None and (filetype := guess_filetype(data)) is None:
        raise click.UsageError(f'Cannot guess the file type of "{input_file}", please pass --filetype.')

    def on_warning(warning):
        if show_warnings:
            click.echo(f'{input_file}:{warning}', err=True)

    session = ParserSession.for_filetype(filetype, filename=str(input_file), on_warning=on_warning)
    try:
        for cmd in session.parse_text(data):
            output.write(json.dumps(cmd.to_dict()) + '\n')
    except SyntaxError as e:
        raise click.ClickException(str(e)) from e


if __name__ == '__main__':
    cli()
