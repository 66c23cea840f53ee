from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional


class TextFormat(IntEnum):
    MOODLE = 0
    HTML = 1
    PLAIN = 2
    WIKI = 3  # Legacy, gets rendered like MOODLE
    MARKDOWN = 4

    @classmethod
    def parse(cls, value) -> Optional['TextFormat']:
        """
        Converts a stored format value (int, digit string or member) to a TextFormat.
        Floats are only accepted if they are whole numbers.
        @return: None if no format is stored
        """
        if value is None or value == '':
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            value = value.strip()
            if not value.isdigit():
                raise ValueError(f'Invalid text format: {value!r}')
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError(f'Invalid text format: {value!r}')
        return cls(int(value))


# Return types of the file picker
FILE_EXTERNAL = 1
FILE_INTERNAL = 2
FILE_REFERENCE = 4
FILE_CONTROLLED_LINK = 8


@dataclass(frozen=True)
class Context:
    id: int = 0
    level: str = 'system'


@dataclass(frozen=True)
class AttemptStep:
    behaviour_vars: Dict[str, str] = field(default_factory=dict)
    qt_vars: Dict[str, str] = field(default_factory=dict)
    sequence_number: int = 0
    timecreated: int = 0

    def has_behaviour_var(self, name: str) -> bool:
        return name in self.behaviour_vars

    def get_behaviour_var(self, name: str, default=None):
        return self.behaviour_vars.get(name, default)

    @staticmethod
    def from_dict(data: Dict, sequence_number: int = 0) -> 'AttemptStep':
        behaviour_vars = data.get('behaviour_vars', {}) or {}
        qt_vars = data.get('qt_vars', {}) or {}
        if not isinstance(behaviour_vars, dict) or not isinstance(qt_vars, dict):
            raise QuestionAttempt.InvalidAttemptError(f'Step {sequence_number} has malformed variables')

        return AttemptStep(
            # Behaviour vars are stored as strings, like on the submitted form
            behaviour_vars={str(k): '' if v is None else str(v) for k, v in behaviour_vars.items()},
            qt_vars={str(k): '' if v is None else str(v) for k, v in qt_vars.items()},
            sequence_number=data.get('sequence_number', sequence_number),
            timecreated=data.get('timecreated', 0),
        )


class QuestionAttempt:
    class InvalidAttemptError(ValueError):
        """An Exception which gets thrown if an attempt could not be built from the given data."""

        pass

    def __init__(
        self,
        usage_id: int,
        slot: int,
        steps: List[AttemptStep] = None,
        default_format: TextFormat = TextFormat.HTML,
    ):
        self.usage_id = usage_id
        self.slot = slot
        if steps is not None:
            self.steps = list(steps)
        else:
            self.steps = []
        self.default_format = default_format

    def get_field_prefix(self) -> str:
        return f'q{self.usage_id}:{self.slot}_'

    def get_behaviour_field_name(self, name: str) -> str:
        return self.get_field_prefix() + '-' + name

    def get_last_step_with_behaviour_var(self, name: str) -> AttemptStep:
        for step in reversed(self.steps):
            if step.has_behaviour_var(name):
                return step
        return AttemptStep()

    @staticmethod
    def from_dict(data: Dict, default_format: TextFormat = TextFormat.HTML) -> 'QuestionAttempt':
        if not isinstance(data, dict):
            raise QuestionAttempt.InvalidAttemptError('An attempt has to be a JSON object')

        try:
            usage_id = int(data['usage_id'])
            slot = int(data['slot'])
        except KeyError as missing:
            raise QuestionAttempt.InvalidAttemptError(f'The attempt is missing the {missing!s} property')
        except (TypeError, ValueError) as err_id:
            raise QuestionAttempt.InvalidAttemptError(f'The attempt has an invalid usage_id or slot: {err_id!s}')

        raw_steps = data.get('steps', [])
        if not isinstance(raw_steps, list):
            raise QuestionAttempt.InvalidAttemptError('The steps of an attempt have to be a list')

        steps = []
        for idx, raw_step in enumerate(raw_steps):
            if not isinstance(raw_step, dict):
                raise QuestionAttempt.InvalidAttemptError(f'Step {idx} has to be a JSON object')
            steps.append(AttemptStep.from_dict(raw_step, idx))

        try:
            attempt_format = TextFormat.parse(data.get('default_format'))
        except ValueError as err_format:
            raise QuestionAttempt.InvalidAttemptError(str(err_format))
        if attempt_format is None:
            attempt_format = default_format

        return QuestionAttempt(usage_id, slot, steps, attempt_format)

    def __str__(self):
        message = 'QuestionAttempt ('

        message += f'usage_id: {self.usage_id}'
        message += f', slot: {self.slot}'
        message += f', steps: {len(self.steps)}'
        message += f', default_format: {self.default_format.name}'
        message += ')'
        return message


@dataclass
class DisplayOptions:
    readonly: Any = False
    context: Any = None


@dataclass(frozen=True)
class EditorActivation:
    editor: str
    element_id: str
    options: Dict[str, Any]
    fp_options: Dict[str, Any]

    def to_dict(self) -> Dict:
        options = dict(self.options)
        context = options.get('context')
        if isinstance(context, Context):
            options['context'] = {'id': context.id, 'level': context.level}
        return {
            'editor': self.editor,
            'element_id': self.element_id,
            'options': options,
            'fp_options': dict(self.fp_options),
        }


@dataclass
class DfExplainOpts:
    attempt_file: str
    init: bool
    readonly: bool
    summary: bool
    requirements: bool
    context_id: int
    path: str
    verbose: bool
    quiet: bool
    log_to_file: bool
