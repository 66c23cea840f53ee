import html

from typing import Dict, Mapping, Optional


def s(text) -> str:
    """
    Escapes a value for use inside HTML content or an attribute value.
    None becomes an empty string.
    """
    if text is None:
        return ''
    return html.escape(str(text), quote=True)


class HtmlWriter:
    """
    Builds HTML fragments as strings.
    Attributes keep the order in which they are given, attributes with a value of None are left out.
    """

    @staticmethod
    def attribute(name: str, value) -> str:
        if value is None:
            return ''
        if isinstance(value, bool):
            value = name if value else None
            if value is None:
                return ''
        elif isinstance(value, int):
            # IntEnum members are written with their number
            value = int(value)
        return f' {name}="{s(value)}"'

    @staticmethod
    def attributes(attributes: Optional[Mapping] = None) -> str:
        if not attributes:
            return ''
        return ''.join(HtmlWriter.attribute(name, value) for name, value in attributes.items())

    @staticmethod
    def start_tag(tag_name: str, attributes: Optional[Mapping] = None) -> str:
        return f'<{tag_name}{HtmlWriter.attributes(attributes)}>'

    @staticmethod
    def end_tag(tag_name: str) -> str:
        return f'</{tag_name}>'

    @staticmethod
    def empty_tag(tag_name: str, attributes: Optional[Mapping] = None) -> str:
        return f'<{tag_name}{HtmlWriter.attributes(attributes)} />'

    @staticmethod
    def tag(tag_name: str, contents: str, attributes: Optional[Mapping] = None) -> str:
        "The contents are inserted as they are, escape them before if needed"
        if contents is None:
            contents = ''
        return HtmlWriter.start_tag(tag_name, attributes) + contents + HtmlWriter.end_tag(tag_name)

    @staticmethod
    def _with_class(class_name: str, attributes: Optional[Mapping]) -> Dict:
        result = dict(attributes or {})
        if class_name:
            if result.get('class'):
                result['class'] = class_name + ' ' + result['class']
            else:
                result['class'] = class_name
        return result

    @staticmethod
    def div(content: str, class_name: str = '', attributes: Optional[Mapping] = None) -> str:
        return HtmlWriter.tag('div', content, HtmlWriter._with_class(class_name, attributes))

    @staticmethod
    def start_div(class_name: str = '', attributes: Optional[Mapping] = None) -> str:
        return HtmlWriter.start_tag('div', HtmlWriter._with_class(class_name, attributes))

    @staticmethod
    def end_div() -> str:
        return HtmlWriter.end_tag('div')

    @staticmethod
    def label(text: str, for_id: Optional[str], colonize: bool = True, attributes: Optional[Mapping] = None) -> str:
        label_attributes = dict(attributes or {})
        if for_id is not None:
            label_attributes['for'] = for_id
        text = (text or '').strip()
        if colonize and text and not text.endswith((':', '?', '!', '.')):
            text += ':'
        return HtmlWriter.tag('label', text, label_attributes)

    @staticmethod
    def select_id(name: str) -> str:
        "The id a select menu gets by default"
        return 'menu' + name.replace('[', '').replace(']', '')

    @staticmethod
    def select_option(label: str, value, selected: bool = False) -> str:
        option_attributes = {'value': value}
        if selected:
            option_attributes['selected'] = 'selected'
        return HtmlWriter.tag('option', s(label), option_attributes)

    @staticmethod
    def select(
        options: Mapping,
        name: str,
        selected=None,
        nothing: Optional[Mapping] = None,
        attributes: Optional[Mapping] = None,
    ) -> str:
        """
        Builds a select menu.
        @param options: value => label of the options, in display order
        @param selected: the value of the selected option, values are compared as strings
        @param nothing: value => label of options that are put in front of the other options
        """
        select_attributes = dict(attributes or {})
        select_id = HtmlWriter.select_id(name)
        select_attributes.setdefault('id', select_id)
        select_attributes = HtmlWriter._with_class('select custom-select ' + select_id, select_attributes)
        select_attributes['name'] = name

        selected_str = None if selected is None else str(int(selected) if isinstance(selected, int) else selected)

        output = ''
        all_options = {}
        all_options.update(nothing or {})
        all_options.update(options)
        for value, label in all_options.items():
            value_str = str(int(value) if isinstance(value, int) else value)
            output += HtmlWriter.select_option(label, value_str, value_str == selected_str)

        return HtmlWriter.tag('select', output, select_attributes)
