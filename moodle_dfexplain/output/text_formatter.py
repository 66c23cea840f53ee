"""
Formatting of user entered text for display, in the way Moodle does it for the different text formats.
"""

import html
import logging
import re

from typing import Dict, Optional

import html2text

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt

from moodle_dfexplain.lang import StringManager
from moodle_dfexplain.types import TextFormat

# Elements that are removed together with their content
FORBIDDEN_TAGS = [
    'script', 'style', 'iframe', 'object', 'embed', 'applet', 'frame', 'frameset', 'meta', 'link', 'base'
]
URL_ATTRIBUTES = ['href', 'src', 'action', 'formaction', 'xlink:href']
UNSAFE_URL_SCHEMES = ('javascript:', 'vbscript:', 'data:text/html')

FORMAT_STRINGS = {
    TextFormat.MOODLE: 'formattext',
    TextFormat.HTML: 'formathtml',
    TextFormat.PLAIN: 'formatplain',
    TextFormat.MARKDOWN: 'formatmarkdown',
}

_markdown = MarkdownIt('commonmark', {'html': True})


def nl2br(text: str) -> str:
    return re.sub(r'(\r\n|\n\r|\n|\r)', r'<br />\1', text)


def clean_text(text: str) -> str:
    "Removes everything from HTML that could run scripts"
    if not text:
        return ''

    soup = BeautifulSoup(text, 'html.parser')
    for element in soup.find_all(FORBIDDEN_TAGS):
        if not element.decomposed:
            element.decompose()

    for element in soup.find_all(True):
        for attribute in list(element.attrs):
            if attribute.lower().startswith('on'):
                del element[attribute]
            elif attribute.lower() in URL_ATTRIBUTES:
                url = re.sub(r'\s+', '', html.unescape(str(element[attribute]))).lower()
                if url.startswith(UNSAFE_URL_SCHEMES):
                    logging.debug('Removing unsafe url from <%s %s>', element.name, attribute)
                    del element[attribute]

    return str(soup)


def text_to_html(text: str, para: bool = True, newlines: bool = True) -> str:
    "Moodle auto-format"
    # Remove whitespace between tags and line breaks around tags
    text = re.sub(r'>\s+<', '><', text)
    text = re.sub(r'[\n\r]<', ' <', text)
    text = re.sub(r'>[\n\r]', '> ', text)

    if newlines:
        text = nl2br(text)

    if para:
        return '<div class="text_to_html">' + text + '</div>'
    return text


def markdown_to_html(text: str) -> str:
    return _markdown.render(text)


def format_text(
    text: Optional[str], text_format=TextFormat.MOODLE, para: bool = True, newlines: bool = True, noclean: bool = False
) -> str:
    """
    Converts user entered text into HTML that is safe to display.
    @param text_format: the format the text was entered in, unknown formats are handled like MOODLE
    @param para: if auto-formatted text should be wrapped in a div
    @param newlines: if line breaks of auto-formatted text should become <br />
    @param noclean: skip the removal of unsafe HTML
    """
    if text is None or text == '':
        return ''

    try:
        text_format = TextFormat.parse(text_format)
    except ValueError:
        logging.debug('Unknown text format %r, using auto-format', text_format)
        text_format = None

    if text_format == TextFormat.HTML:
        result = text

    elif text_format == TextFormat.PLAIN:
        result = html.escape(text, quote=True)
        result = result.replace('  ', '&nbsp; ')
        return nl2br(result)

    elif text_format == TextFormat.MARKDOWN:
        result = markdown_to_html(text)

    else:
        result = text_to_html(text, para, newlines)

    if noclean:
        return result
    return clean_text(result)


def format_text_menu(strings: StringManager) -> Dict[TextFormat, str]:
    "@return: format => localized name of all formats a user can choose from"
    return {text_format: strings.get_string(identifier) for text_format, identifier in FORMAT_STRINGS.items()}


def html_to_text(text: str, width: int = 0) -> str:
    "Converts HTML to plain (markdown like) text"
    if not text:
        return ''
    h2t_handler = html2text.HTML2Text()
    h2t_handler.body_width = width
    h2t_handler.ignore_images = True
    return h2t_handler.handle(text).strip()
