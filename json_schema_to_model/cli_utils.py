"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

PROGRAM_NAME = "json_schema_to_model"


def _format_value(value) -> str:
    # File paths are shown by name only, so generated files do not depend on the machine
    if isinstance(value, (str, Path)):
        path_obj = Path(str(value))
        return path_obj.name if path_obj.exists() else str(value)
    return str(value)


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line from the current Click context.

    Arguments come first, then the options that differ from their
    defaults. Repeated options and variadic arguments are expanded.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return PROGRAM_NAME

    arguments = []
    options = []
    for param in click_command.params:
        value = ctx.params.get(param.name)
        if value is None or value == () or value is False:
            continue
        values = value if isinstance(value, tuple) else (value,)

        if isinstance(param, click.Argument):
            arguments.extend(_format_value(v) for v in values)
        elif isinstance(param, click.Option):
            if value == param.default:
                continue
            flag = param.opts[0] if param.opts else f"--{param.name}"
            if param.is_flag:
                options.append(flag)
                continue
            for v in values:
                options.extend([flag, _format_value(v)])

    return " ".join([PROGRAM_NAME, *arguments, *options])
