from typing import List

from moodle_dfexplain.editors.common import TextEditor
from moodle_dfexplain.types import TextFormat


class AttoEditor(TextEditor):
    NAME = 'atto'

    def get_supported_formats(self) -> List[TextFormat]:
        return [TextFormat.HTML]

    def get_preferred_format(self) -> TextFormat:
        return TextFormat.HTML
