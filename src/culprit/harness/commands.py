"""Rendering of harness command templates."""

import platform
import shlex

from culprit.core.config import HarnessConfig


def quote(value: str) -> str:
    """Quote one argument for the platform shell."""
    if platform.system() == 'Windows':
        return '"' + value.replace('"', '\\"') + '"'
    return shlex.quote(value)


def render_command(
    template: str, harness: HarnessConfig, **values: object
) -> str:
    """Fill a command template with shell-quoted values.

    {binary} is always available and is left unquoted so a configured
    binary may carry its own arguments (e.g. "python fake.py").

    Args:
        template: Template with {binary} and any names in values
        harness: Harness configuration supplying the binary
        **values: Other placeholders, quoted before substitution

    Returns:
        Command line ready for the shell

    Raises:
        KeyError: If the template names a placeholder not supplied
    """
    quoted = {name: quote(str(value)) for name, value in values.items()}
    return template.format(binary=harness.binary, **quoted)
