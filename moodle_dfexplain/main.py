import argparse
import json
import logging
import os
import sys
import traceback

from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict

import colorlog
import sentry_sdk

from colorama import just_fix_windows_console

from moodle_dfexplain.behaviour import summarise_explanation
from moodle_dfexplain.config import ConfigHelper
from moodle_dfexplain.editors import PageRequirements
from moodle_dfexplain.output.renderer import ExplanationRenderer
from moodle_dfexplain.types import Context, DfExplainOpts, DisplayOptions, QuestionAttempt
from moodle_dfexplain.utils import check_debug, get_nested
from moodle_dfexplain.version import __version__


class ReRaiseOnError(logging.StreamHandler):
    "A logging-handler class which allows the exception-catcher of i.e. PyCharm to intervene"

    def emit(self, record):
        if hasattr(record, 'exception'):
            raise record.exception


def connect_sentry(config: ConfigHelper) -> bool:
    "Return True if connected"
    try:
        sentry_dsn = config.get_sentry_dsn()
        if sentry_dsn:
            sentry_sdk.init(sentry_dsn)
            return True
    except sentry_sdk.utils.BadDsn:
        logging.warning('The configured sentry_dsn is invalid, errors will not be reported')
    return False


def load_attempt_data(attempt_file: str) -> Dict:
    try:
        with open(attempt_file, 'r', encoding='utf-8') as attempt_json:
            return json.load(attempt_json)
    except (IOError, OSError) as err_load:
        raise QuestionAttempt.InvalidAttemptError(f'Attempt could not be loaded from {attempt_file}\n{err_load!s}')
    except ValueError as err_parse:
        raise QuestionAttempt.InvalidAttemptError(f'Attempt in {attempt_file} is not valid JSON\n{err_parse!s}')


def get_context(opts: DfExplainOpts, attempt_data: Dict) -> Context:
    if opts.context_id is not None:
        return Context(opts.context_id, 'module')
    return Context(int(get_nested(attempt_data, 'context.id', 0)), get_nested(attempt_data, 'context.level', 'system'))


def run_main(config: ConfigHelper, opts: DfExplainOpts):
    sentry_connected = connect_sentry(config)

    try:
        strings = config.get_string_manager()
        attempt_data = load_attempt_data(opts.attempt_file)
        qa = QuestionAttempt.from_dict(attempt_data, config.get_default_explanation_format())
        logging.debug('Loaded %s', qa)

        if opts.summary:
            summary = summarise_explanation(qa.get_last_step_with_behaviour_var('explanation'), strings)
            if summary is None:
                logging.info('The attempt has no explanation.')
            else:
                print(summary)
            return

        page = PageRequirements()
        renderer = ExplanationRenderer(strings, config.get_editor_registry(), page)
        options = DisplayOptions(readonly=opts.readonly, context=get_context(opts, attempt_data))
        print(renderer.controls(qa, options))

        if opts.requirements:
            print(json.dumps(page.to_list(), indent=4))
        logging.debug('%d editor(s) requested for the page', len(page))

    except BaseException as base_err:
        if sentry_connected:
            sentry_sdk.capture_exception(base_err)
        raise base_err


def init_config(config: ConfigHelper):
    if config.is_present():
        logging.warning('There is already a configuration in %s, it will be overwritten', config.config_path)
    config.set_defaults()
    logging.info('A default configuration was written to %s', config.config_path)


def setup_logger(opts: DfExplainOpts):
    file_log_handler = RotatingFileHandler(
        str(Path(opts.path) / 'MoodleDfExplain.log'),
        mode='a',
        maxBytes=1 * 1024 * 1024,
        backupCount=2,
        encoding='utf-8',
        delay=True,
    )
    file_log_handler.setFormatter(
        logging.Formatter('%(asctime)s  %(levelname)s  {%(module)s}  %(message)s', '%Y-%m-%d %H:%M:%S')
    )
    # Logs go to stderr, stdout carries the rendered HTML
    stdout_log_handler = colorlog.StreamHandler(sys.stderr)
    if sys.stderr.isatty() and not opts.verbose:
        stdout_log_handler.setFormatter(colorlog.ColoredFormatter('%(log_color)s%(asctime)s %(message)s', '%H:%M:%S'))
    else:
        stdout_log_handler.setFormatter(
            colorlog.ColoredFormatter(
                '%(log_color)s%(asctime)s  %(levelname)s  {%(module)s}  %(message)s', '%Y-%m-%d %H:%M:%S'
            )
        )

    app_log = logging.getLogger()
    if opts.quiet:
        file_log_handler.setLevel(logging.ERROR)
        app_log.setLevel(logging.ERROR)
        stdout_log_handler.setLevel(logging.ERROR)
    elif opts.verbose:
        file_log_handler.setLevel(logging.DEBUG)
        app_log.setLevel(logging.DEBUG)
        stdout_log_handler.setLevel(logging.DEBUG)
    else:
        file_log_handler.setLevel(logging.INFO)
        app_log.setLevel(logging.INFO)
        stdout_log_handler.setLevel(logging.INFO)

    app_log.addHandler(stdout_log_handler)
    if opts.log_to_file:
        app_log.addHandler(file_log_handler)

    if opts.verbose:
        logging.debug('moodle-dfexplain version: %s', __version__)
        logging.debug('python version: %s', ".".join(map(str, sys.version_info[:3])))

    if check_debug():
        logging.info('Debug-Mode detected. Errors will be re-risen.')
        app_log.addHandler(ReRaiseOnError())

    if not opts.verbose:
        logging.getLogger('markdown_it').setLevel(logging.WARNING)


def _dir_path(path):
    if os.path.isdir(path):
        return path
    raise argparse.ArgumentTypeError(f'"{str(path)}" is not a valid path. Make sure the directory exists.')


def get_parser():
    """
    Creates a new argument parser.
    """
    parser = argparse.ArgumentParser(
        description=(
            'Renders the explanation block of a question attempt that uses the'
            + ' deferred feedback with explanation behaviour.'
        )
    )

    parser.add_argument(
        'attempt_file',
        nargs='?',
        default=None,
        help='A JSON file describing the question attempt (usage_id, slot, steps).',
    )

    group = parser.add_mutually_exclusive_group()

    group.add_argument(
        '-i',
        '--init',
        dest='init',
        default=False,
        action='store_true',
        help='Write a default configuration file to PATH.',
    )

    group.add_argument(
        '-s',
        '--summary',
        dest='summary',
        default=False,
        action='store_true',
        help='Print the stored explanation as one line of plain text instead of HTML.',
    )

    group.add_argument(
        '--version',
        action='version',
        version='moodle-dfexplain ' + __version__,
        help='Print program version and exit',
    )

    parser.add_argument(
        '-r',
        '--readonly',
        dest='readonly',
        default=False,
        action='store_true',
        help='Render the submitted explanation read-only instead of the editable input.',
    )

    parser.add_argument(
        '--requirements',
        dest='requirements',
        default=False,
        action='store_true',
        help='Also print the text editors the page has to initialise, as JSON.',
    )

    parser.add_argument(
        '-ctx',
        '--context-id',
        dest='context_id',
        default=None,
        type=int,
        help='The id of the context the attempt is rendered in. (default: taken from the attempt file)',
    )

    parser.add_argument(
        '-p',
        '--path',
        dest='path',
        default='.',
        type=_dir_path,
        help=(
            'Sets the location of the configuration and logs. PATH must be an'
            + ' existing directory in which you have read and write access. (default: current working directory)'
        ),
    )

    parser.add_argument(
        '-v',
        '--verbose',
        dest='verbose',
        default=False,
        action='store_true',
        help='Print various debugging information',
    )

    parser.add_argument(
        '-q',
        '--quiet',
        dest='quiet',
        default=False,
        action='store_true',
        help='Sets the log level to error',
    )

    parser.add_argument(
        '-ltf',
        '--log-to-file',
        dest='log_to_file',
        default=False,
        action='store_true',
        help='Log all output additionally to a log file called MoodleDfExplain.log',
    )

    return parser


# --- called at the program invocation: -------------------------------------
def main(args=None):
    """The main routine."""
    just_fix_windows_console()
    parser = get_parser()
    opts = DfExplainOpts(**vars(parser.parse_args(args)))
    setup_logger(opts)

    config = ConfigHelper(opts.path)
    if opts.init:
        init_config(config)
        sys.exit(0)

    if opts.attempt_file is None:
        parser.error('the attempt_file argument is required')

    if config.is_present():
        try:
            config.load()
        except ConfigHelper.NoConfigError as err_config:
            logging.error('Error: %s', err_config)
            logging.warning('You can create a new configuration with the --init option')
            sys.exit(-1)
    else:
        logging.debug('No configuration found in %s, using defaults', config.config_path)

    try:
        run_main(config, opts)
    except BaseException as base_err:  # pylint: disable=broad-except
        if opts.verbose or check_debug():
            logging.error(traceback.format_exc(), extra={'exception': base_err})
        else:
            logging.error('Exception: %s', base_err)

        logging.debug('Exception-Handling completed. Exiting...')

        sys.exit(1)
