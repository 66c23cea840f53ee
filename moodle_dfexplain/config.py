import json
import os

from pathlib import Path
from typing import List, Optional

from moodle_dfexplain.editors import DEFAULT_ENABLED_EDITORS, EditorRegistry
from moodle_dfexplain.lang import FALLBACK_LANG, StringManager
from moodle_dfexplain.types import TextFormat


class ConfigHelper:
    "Handles the saving, formatting and loading of the local configuration."

    class NoConfigError(ValueError):
        """An Exception which gets thrown if config could not be loaded."""

        pass

    def __init__(self, config_dir: str):
        self._whole_config = {}
        self.config_path = str(Path(config_dir) / 'config.json')

    def is_present(self) -> bool:
        # Tests if a configuration file exists
        return os.path.isfile(self.config_path)

    def load(self):
        # Opens the configuration file and parse it to a JSON object
        try:
            with open(self.config_path, 'r', encoding='utf-8') as config_file:
                config_raw = config_file.read()
                self._whole_config = json.loads(config_raw)
        except (IOError, OSError) as err_load:
            raise ConfigHelper.NoConfigError(f'Configuration could not be loaded from {self.config_path}\n{err_load!s}')
        except ValueError as err_parse:
            raise ConfigHelper.NoConfigError(f'Configuration in {self.config_path} is not valid JSON\n{err_parse!s}')

        if not isinstance(self._whole_config, dict):
            self._whole_config = {}
            raise ConfigHelper.NoConfigError(f'Configuration in {self.config_path} has to be a JSON object')

    def _save(self):
        config_formatted = json.dumps(self._whole_config, indent=4)
        # Saves the JSON object back to file
        with os.fdopen(
            os.open(self.config_path, flags=os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode=0o600),
            mode='w',
            encoding='utf-8',
        ) as config_file:
            config_file.write(config_formatted)

    def get_property(self, key: str) -> any:
        # return a property if configured
        try:
            return self._whole_config[key]
        except KeyError:
            raise ValueError(f'The {key}-Property is not yet configured!')

    def get_property_or(self, key: str, default: any = None) -> any:
        # return a property if configured
        try:
            return self._whole_config[key]
        except KeyError:
            return default

    def set_property(self, key: str, value: any):
        # sets a property in the JSON object
        self._whole_config.update({key: value})
        self._save()

    def remove_property(self, key):
        # removes a property from the JSON object
        self._whole_config.pop(key, None)
        self._save()

    # ---------------------------- GETTERS ------------------------------------

    def get_texteditors(self) -> List[str]:
        # return the enabled text editors, in the order they should be tried
        texteditors = self.get_property_or('texteditors', DEFAULT_ENABLED_EDITORS)
        if isinstance(texteditors, str):
            texteditors = [name.strip() for name in texteditors.split(',') if name.strip() != '']
        return texteditors

    def get_htmleditor(self) -> Optional[str]:
        # return the text editor the user prefers
        return self.get_property_or('htmleditor', None)

    def get_lang(self) -> str:
        return self.get_property_or('lang', FALLBACK_LANG)

    def get_default_explanation_format(self) -> TextFormat:
        # return the format used when an attempt stores none
        try:
            default_format = TextFormat.parse(self.get_property_or('default_explanation_format', None))
        except ValueError:
            default_format = None
        if default_format is None:
            return TextFormat.HTML
        return default_format

    def get_sentry_dsn(self) -> Optional[str]:
        return self.get_property_or('sentry_dsn', None)

    def get_editor_registry(self) -> EditorRegistry:
        return EditorRegistry(self.get_texteditors(), self.get_htmleditor())

    def get_string_manager(self) -> StringManager:
        return StringManager(self.get_lang())

    # ---------------------------- SETTERS ------------------------------------

    def set_defaults(self):
        self.set_property('texteditors', list(DEFAULT_ENABLED_EDITORS))
        self.set_property('lang', FALLBACK_LANG)
        self.set_property('default_explanation_format', int(TextFormat.HTML))
