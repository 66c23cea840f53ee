import json
import logging
import re

from functools import lru_cache
from pathlib import Path
from typing import Dict

LANG_ROOT = Path(__file__).resolve().parent
FALLBACK_LANG = 'en'


@lru_cache(maxsize=None)
def load_string_pack(lang: str, component: str) -> Dict[str, str]:
    "@return: identifier => string of one component in one language, empty if there is no such pack"
    pack_path = LANG_ROOT / lang / (component + '.json')
    if not pack_path.is_file():
        return {}
    with open(pack_path, 'r', encoding='utf-8') as pack_file:
        return json.load(pack_file)


def available_languages():
    return sorted(entry.name for entry in LANG_ROOT.iterdir() if entry.is_dir() and not entry.name.startswith('_'))


class StringManager:
    """
    Resolves string identifiers of a component to localized strings.
    Strings missing in the chosen language are taken from the English pack.
    """

    A_FIELD_PATTERN = re.compile(r'\{\$a->([A-Za-z0-9_]+)\}')

    def __init__(self, lang: str = FALLBACK_LANG):
        if lang not in available_languages():
            logging.debug('No language pack for "%s", using "%s" instead', lang, FALLBACK_LANG)
            lang = FALLBACK_LANG
        self.lang = lang

    def string_exists(self, identifier: str, component: str = 'core') -> bool:
        return identifier in load_string_pack(self.lang, component) or identifier in load_string_pack(
            FALLBACK_LANG, component
        )

    def get_string(self, identifier: str, component: str = 'core', a=None) -> str:
        string = load_string_pack(self.lang, component).get(identifier)
        if string is None:
            string = load_string_pack(FALLBACK_LANG, component).get(identifier)
        if string is None:
            logging.warning('Invalid get_string() identifier: "%s" or component "%s"', identifier, component)
            return f'[[{identifier}]]'

        if a is None:
            return string
        if isinstance(a, dict):
            return self.A_FIELD_PATTERN.sub(lambda match: str(a.get(match.group(1), match.group(0))), string)
        return string.replace('{$a}', str(a))
