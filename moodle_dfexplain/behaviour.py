import logging

from typing import Dict, Mapping, Optional

from moodle_dfexplain.lang import StringManager
from moodle_dfexplain.output.renderer import COMPONENT
from moodle_dfexplain.output.text_formatter import format_text, html_to_text
from moodle_dfexplain.types import AttemptStep, DisplayOptions, QuestionAttempt, TextFormat

# The behaviour vars this behaviour expects on submit, with their types
EXPECTED_DATA = {'explanation': str, 'explanationformat': int}


def get_expected_data(options: DisplayOptions) -> Dict[str, type]:
    if options.readonly:
        return {}
    return dict(EXPECTED_DATA)


def extract_submitted_explanation(qa: QuestionAttempt, post: Mapping) -> Dict[str, str]:
    """
    Picks the explanation fields of an attempt out of submitted form data.
    @return: the behaviour vars that got submitted, empty if the explanation is not part of the data
    """
    inputname = qa.get_behaviour_field_name('explanation')
    if inputname not in post:
        return {}

    result = {'explanation': str(post[inputname] or '').replace('\r\n', '\n')}

    try:
        submitted_format = TextFormat.parse(post.get(inputname + 'format'))
    except ValueError as err_format:
        logging.warning('Ignoring submitted explanation format of %s: %s', qa, err_format)
        submitted_format = None
    if submitted_format is None:
        submitted_format = qa.default_format
    result['explanationformat'] = str(int(submitted_format))
    return result


def is_same_explanation(step: AttemptStep, submitted: Mapping) -> bool:
    "Whether saving the submitted vars would leave the stored explanation unchanged"
    if not submitted:
        return True

    if step.get_behaviour_var('explanation', '') != submitted.get('explanation', ''):
        return False

    if not step.has_behaviour_var('explanation'):
        return True

    try:
        submitted_format = TextFormat.parse(submitted.get('explanationformat'))
    except ValueError as err_format:
        # An unreadable format never matches the stored one
        logging.warning('Submitted explanation format is invalid: %s', err_format)
        return False

    try:
        stored_format = TextFormat.parse(step.get_behaviour_var('explanationformat'))
    except ValueError:
        return False

    return stored_format == submitted_format


def summarise_explanation(step: AttemptStep, strings: StringManager) -> Optional[str]:
    "@return: the explanation as plain text on one line, None if there is no explanation"
    if not step.has_behaviour_var('explanation'):
        return None

    formatted = format_text(
        step.get_behaviour_var('explanation'), step.get_behaviour_var('explanationformat'), para=False
    )
    plain = ' '.join(html_to_text(formatted).split())
    return strings.get_string('explanation', COMPONENT, plain)
