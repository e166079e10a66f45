# tests/conftest.py
import pytest

from hangul import ComposingSink, HangulAutomaton


class RecordingSink(ComposingSink):
    """Keeps every sink operation as a (name, text) tuple."""

    def __init__(self):
        self.ops = []

    def start_new(self, codepoint):
        self.ops.append(("start_new", chr(codepoint)))

    def replace(self, codepoint):
        self.ops.append(("replace", chr(codepoint)))

    def append_new(self, codepoint):
        self.ops.append(("append_new", chr(codepoint)))

    def clear(self):
        self.ops.append(("clear", None))

    def commit(self):
        self.ops.append(("commit", None))


class BufferSink(ComposingSink):
    """A tiny editor: committed text followed by one preedit span."""

    def __init__(self):
        self.committed = ""
        self.preedit = ""

    @property
    def text(self):
        return self.committed + self.preedit

    def start_new(self, codepoint):
        self.preedit = chr(codepoint)

    def replace(self, codepoint):
        self.preedit = chr(codepoint)

    def append_new(self, codepoint):
        self.committed += self.preedit
        self.preedit = chr(codepoint)

    def clear(self):
        self.preedit = ""

    def commit(self):
        self.committed += self.preedit
        self.preedit = ""


@pytest.fixture
def recorder():
    return RecordingSink()


@pytest.fixture
def buffer():
    return BufferSink()


@pytest.fixture
def automaton(buffer):
    return HangulAutomaton(buffer)


@pytest.fixture
def recording_automaton(recorder):
    return HangulAutomaton(recorder)


@pytest.fixture
def type_keys():
    """Feed Latin keys to an automaton; '<' is a backspace."""
    def _type(automaton, keys):
        for key in keys:
            if key == "<":
                automaton.backspace()
            else:
                automaton.process_code(key)
    return _type
