
import pytest

from ..excellon import ExcellonParser
from ..rs274x import GerberParser


class Recorder:
    """ Collects everything a parser session reports through its callbacks. """

    def __init__(self):
        self.commands = []
        self.warnings = []
        self.errors = []

    def session_kwargs(self):
        return dict(on_command=self.commands.append, on_warning=self.warnings.append, on_error=self.errors.append)

    @property
    def messages(self):
        return [ w.message for w in self.warnings ]

    def dicts(self):
        return [ cmd.to_dict() for cmd in self.commands ]


@pytest.fixture()
def recorder():
    return Recorder()


@pytest.fixture()
def drill(recorder):
    return ExcellonParser(filename='test.drl', **recorder.session_kwargs())


@pytest.fixture()
def gerber(recorder):
    return GerberParser(filename='test.gbr', **recorder.session_kwargs())

