import logging

from moodle_dfexplain.editors import EditorRegistry, PageRequirements
from moodle_dfexplain.lang import StringManager
from moodle_dfexplain.output.html_writer import HtmlWriter as HW, s
from moodle_dfexplain.output.text_formatter import format_text, format_text_menu
from moodle_dfexplain.types import FILE_EXTERNAL, AttemptStep, DisplayOptions, QuestionAttempt, TextFormat

COMPONENT = 'qbehaviour_deferredfeedbackexplain'


class ExplanationRenderer:
    """
    Renders the parts of a question belonging to the deferred feedback with explanation behaviour.
    """

    def __init__(self, strings: StringManager, editors: EditorRegistry, page: PageRequirements):
        self.strings = strings
        self.editors = editors
        self.page = page

    def controls(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        return HW.div(HW.div(self.explanation(qa, options), 'answer'), 'ablock')

    def explanation(self, qa: QuestionAttempt, options: DisplayOptions) -> str:
        """
        Render the explanation as either a text editor, or read-only, as applicable.
        @param qa: a question attempt.
        @param options: controls what should and should not be displayed.
        @return: HTML fragment.
        """
        step = qa.get_last_step_with_behaviour_var('explanation')

        if not options.readonly:
            return self.explanation_input(qa, step, options.context)
        return self.explanation_read_only(qa, step, options.context)

    def _prompt(self) -> str:
        return HW.tag('p', self.strings.get_string('pleaseexplain', COMPONENT))

    def explanation_read_only(self, qa: QuestionAttempt, step: AttemptStep, context) -> str:
        """
        Render the explanation in read-only form.
        @param step: from which to get the current explanation.
        @return: HTML fragment.
        """
        output = self._prompt()

        # A stored empty explanation still gets its div
        if step.has_behaviour_var('explanation'):
            output += HW.div(
                format_text(
                    step.get_behaviour_var('explanation'),
                    step.get_behaviour_var('explanationformat'),
                    para=False,
                ),
                'explanation_readonly',
            )

        return output

    def explanation_input(self, qa: QuestionAttempt, step: AttemptStep, context) -> str:
        """
        Render the explanation in a text editor.
        @param step: from which to get the current explanation.
        @return: HTML fragment.
        """
        inputname = qa.get_behaviour_field_name('explanation')
        explanation = step.get_behaviour_var('explanation', '')
        try:
            explanationformat = TextFormat.parse(step.get_behaviour_var('explanationformat'))
        except ValueError as err_format:
            logging.warning('Ignoring stored explanation format of %s: %s', qa, err_format)
            explanationformat = None
        if explanationformat is None:
            explanationformat = qa.default_format
        element_id = inputname + '_id'

        editor = self.editors.get_preferred_editor(explanationformat)
        strformats = format_text_menu(self.strings)
        formats = {fid: strformats.get(fid, fid.name) for fid in editor.get_supported_formats()}

        editor.use_editor(self.page, element_id, {'context': context, 'autosave': False}, {'return_types': FILE_EXTERNAL})

        output = self._prompt()

        output += HW.div(
            HW.tag('textarea', s(explanation), {'id': element_id, 'name': inputname, 'rows': 5, 'cols': 60})
        )

        output += HW.start_div()
        if len(formats) == 1:
            output += HW.empty_tag(
                'input', {'type': 'hidden', 'name': inputname + 'format', 'value': next(iter(formats))}
            )
        else:
            output += HW.label(
                self.strings.get_string('format'), HW.select_id(inputname + 'format'), colonize=False
            )
            output += ' '
            output += HW.select(formats, inputname + 'format', explanationformat)
        output += HW.end_div()

        return output
