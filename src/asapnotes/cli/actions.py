"""Environment-aware argparse Action classes for the asapnotes CLI.

Every option added through ``add_env_argument`` takes its default from an
``ASAPNOTES_<DEST>`` environment variable when one is set. Explicit command
line arguments always win.
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import os

from asapnotes.constants import ENV_PREFIX

TRUE_VALUES = ("true", "1", "yes", "on")


def env_key_for(dest: str) -> str:
    """Return the environment variable name for an argparse destination."""
    return f"{ENV_PREFIX}{dest.upper().replace('-', '_')}"


def _dest_from_options(option_strings, kwargs, strip_no: bool = False):
    dest = kwargs.get("dest")
    if dest is not None:
        return dest
    for option in option_strings:
        if strip_no and option.startswith("--no-"):
            return option[5:].replace("-", "_")
        if option.startswith("--"):
            return option[2:].replace("-", "_")
    for option in option_strings:
        if option.startswith("-"):
            return option[1:]
    return None


class EnvironmentAwareAction(argparse._StoreAction):
    """Store action that takes its default from the environment."""

    def __init__(self, option_strings, *args, **kwargs):
        dest = _dest_from_options(option_strings, kwargs)
        if dest:
            env_key = env_key_for(dest)
            env_value = os.environ.get(env_key)
            if env_value is not None:
                value_type = kwargs.get("type")
                try:
                    kwargs["default"] = value_type(env_value) if value_type is not None else env_value
                except (ValueError, TypeError) as e:
                    # Log warning but don't fail initialization
                    logging.warning(f"Invalid environment variable {env_key}={env_value}: {e}")

        super().__init__(option_strings, *args, **kwargs)


class EnvironmentAwareBooleanAction(argparse._StoreTrueAction):
    """Boolean flag action that takes its default from the environment."""

    def __init__(self, option_strings, *args, **kwargs):
        dest = _dest_from_options(option_strings, kwargs)
        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in TRUE_VALUES

        super().__init__(option_strings, *args, **kwargs)


class EnvironmentAwareBooleanFalseAction(argparse._StoreFalseAction):
    """Negative flag action (``--no-*``) that takes its default from the environment.

    ``ASAPNOTES_HEARTBEAT=false`` has the same effect as ``--no-heartbeat``.
    """

    def __init__(self, option_strings, *args, **kwargs):
        dest = _dest_from_options(option_strings, kwargs, strip_no=True)
        if dest:
            env_value = os.environ.get(env_key_for(dest))
            if env_value is not None:
                kwargs["default"] = env_value.lower() in TRUE_VALUES

        super().__init__(option_strings, *args, **kwargs)


def add_env_argument(parser, *args, **kwargs):
    """Add an argument with automatic environment variable support.

    The environment-aware action is chosen from the ``action`` keyword.
    """
    action = kwargs.get("action", "store")

    if action == "store_true":
        kwargs["action"] = EnvironmentAwareBooleanAction
    elif action == "store_false":
        kwargs["action"] = EnvironmentAwareBooleanFalseAction
    elif action in ("store", None):
        kwargs["action"] = EnvironmentAwareAction

    return parser.add_argument(*args, **kwargs)
