import sys

from typing import Dict


def check_debug() -> bool:
    """Return if the debugger is currently active"""
    return 'pydevd' in sys.modules or (hasattr(sys, 'gettrace') and sys.gettrace() is not None)


def get_nested(from_dict: Dict, key: str, default=None):
    keys = key.split('.')
    try:
        result = from_dict
        for key in keys:
            result = result[key]
        return result
    except (KeyError, TypeError):
        return default
