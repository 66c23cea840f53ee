from typing import Dict, List, Optional

from moodle_dfexplain.editors.common import TextEditor
from moodle_dfexplain.types import EditorActivation, TextFormat


class TextareaEditor(TextEditor):
    "The plain textarea, it can be used for every format"

    NAME = 'textarea'

    def get_supported_formats(self) -> List[TextFormat]:
        return [TextFormat.HTML, TextFormat.MOODLE, TextFormat.PLAIN, TextFormat.MARKDOWN]

    def get_preferred_format(self) -> TextFormat:
        return TextFormat.MOODLE

    def activation_descriptor(self, element_id: str, options: Dict, fp_options: Dict) -> Optional[EditorActivation]:
        return None
