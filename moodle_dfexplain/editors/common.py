from abc import ABCMeta, abstractmethod
from typing import Dict, List, Optional

from moodle_dfexplain.types import EditorActivation, TextFormat


class PageRequirements:
    "Collects the editors that have to be initialised on the page, one per element id"

    def __init__(self):
        self._activations: Dict[str, EditorActivation] = {}

    def add_editor(self, activation: EditorActivation):
        # A later request for the same element replaces the earlier one
        self._activations[activation.element_id] = activation

    def get_editor_activations(self) -> List[EditorActivation]:
        return list(self._activations.values())

    def to_list(self) -> List[Dict]:
        return [activation.to_dict() for activation in self._activations.values()]

    def __len__(self):
        return len(self._activations)


class TextEditor(metaclass=ABCMeta):
    "Common class for a text editor that can be attached to a textarea"

    NAME = None

    @abstractmethod
    def get_supported_formats(self) -> List[TextFormat]:
        """
        Returns the text formats this editor can edit, in the order they should be offered.
        """
        pass

    @abstractmethod
    def get_preferred_format(self) -> TextFormat:
        pass

    def supports_format(self, text_format: Optional[TextFormat]) -> bool:
        return text_format is None or text_format in self.get_supported_formats()

    def activation_descriptor(self, element_id: str, options: Dict, fp_options: Dict) -> Optional[EditorActivation]:
        """
        Describes how the editor gets initialised for an element.
        @param options: editor options, e.g. the context and if autosave is used
        @param fp_options: file picker options, e.g. which return types are accepted
        @return: None if the editor needs no initialisation
        """
        return EditorActivation(
            editor=self.NAME,
            element_id=element_id,
            options=dict(options or {}),
            fp_options=dict(fp_options or {}),
        )

    def use_editor(self, page: PageRequirements, element_id: str, options: Dict = None, fp_options: Dict = None):
        "Registers the editor for the element on the page"
        activation = self.activation_descriptor(element_id, options, fp_options)
        if activation is not None:
            page.add_editor(activation)

    def __str__(self):
        return f'TextEditor ({self.NAME})'
