import logging

from typing import Dict, List, Optional

from moodle_dfexplain.editors.common import PageRequirements, TextEditor
from moodle_dfexplain.types import TextFormat

from moodle_dfexplain.editors.atto import AttoEditor
from moodle_dfexplain.editors.textarea import TextareaEditor
from moodle_dfexplain.editors.tiny import TinyEditor

__all__ = ['AttoEditor', 'EditorRegistry', 'PageRequirements', 'TextareaEditor', 'TextEditor', 'TinyEditor']

ALL_EDITORS = [Class for name, Class in globals().items() if name.endswith('Editor') and name != 'TextEditor']

DEFAULT_ENABLED_EDITORS = ['tiny', 'atto', 'textarea']


def get_all_editor_classes() -> Dict[str, type]:
    return {editor.NAME: editor for editor in ALL_EDITORS}


class EditorRegistry:
    """
    Knows the enabled text editors and picks the one to use for a text format.
    """

    class UnknownEditorError(ValueError):
        """An Exception which gets thrown if an editor is requested that does not exist."""

        pass

    def __init__(self, enabled: List[str] = None, preference: Optional[str] = None):
        if enabled is None:
            enabled = DEFAULT_ENABLED_EDITORS
        self.enabled_names = list(enabled)
        self.preference = preference or None

    def get_editor(self, name: str) -> TextEditor:
        editor_classes = get_all_editor_classes()
        if name not in editor_classes:
            raise EditorRegistry.UnknownEditorError(f'There is no text editor called "{name}"')
        return editor_classes[name]()

    def get_enabled(self) -> List[TextEditor]:
        "@return: the enabled editors in configured order, unknown names are skipped"
        result = []
        for name in self.enabled_names:
            try:
                editor = self.get_editor(name)
            except EditorRegistry.UnknownEditorError:
                logging.warning('Skipping unknown text editor "%s" in the list of enabled editors', name)
                continue
            if any(enabled.NAME == editor.NAME for enabled in result):
                continue
            result.append(editor)
        return result

    def get_preferred_editor(self, text_format: Optional[TextFormat] = None) -> TextEditor:
        """
        Returns the editor the user prefers if it supports the format,
        otherwise the first enabled editor that does.
        @param text_format: None if any format is fine
        """
        enabled = self.get_enabled()

        if self.preference is not None:
            for idx, editor in enumerate(enabled):
                if editor.NAME == self.preference:
                    enabled.insert(0, enabled.pop(idx))
                    break

        for editor in enabled:
            if editor.supports_format(text_format):
                logging.debug('Using %s for text format %r', editor, text_format)
                return editor

        logging.debug('No enabled editor supports text format %r, falling back to the textarea', text_format)
        return TextareaEditor()
