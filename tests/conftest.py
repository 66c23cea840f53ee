import logging
import sys

from pathlib import Path

import pytest

# Add the project root to sys.path so moodle_dfexplain can be imported without installing it
ROOT_PATH = Path(__file__).resolve().parent.parent
if ROOT_PATH.as_posix() not in sys.path:
    sys.path.insert(0, ROOT_PATH.as_posix())

from moodle_dfexplain.editors import EditorRegistry, PageRequirements  # noqa: E402
from moodle_dfexplain.lang import StringManager  # noqa: E402
from moodle_dfexplain.output.renderer import ExplanationRenderer  # noqa: E402
from moodle_dfexplain.types import AttemptStep, Context, QuestionAttempt, TextFormat  # noqa: E402


@pytest.fixture(autouse=True)
def restore_root_logger():
    """The CLI configures the root logger, undo that after every test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def strings():
    return StringManager('en')


@pytest.fixture
def page():
    return PageRequirements()


@pytest.fixture
def context():
    return Context(42, 'module')


@pytest.fixture
def make_renderer(strings, page):
    def _make(enabled=None, preference=None):
        return ExplanationRenderer(strings, EditorRegistry(enabled, preference), page)

    return _make


@pytest.fixture
def make_attempt():
    def _make(*behaviour_vars, usage_id=12, slot=3, default_format=TextFormat.HTML):
        steps = [AttemptStep(dict(step_vars), sequence_number=idx) for idx, step_vars in enumerate(behaviour_vars)]
        return QuestionAttempt(usage_id, slot, steps, default_format)

    return _make
