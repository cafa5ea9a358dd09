"""
utils/args.py
-------------
Parsing helpers for bot command arguments.
"""


def parse_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """
    Split command arguments into positionals and key=value options.

    Example:
        ['500', 'upi', 'every=monthly', 'upi_id=me@bank']
        -> (['500', 'upi'], {'every': 'monthly', 'upi_id': 'me@bank'})
    """
    positional, options = [], {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key:
            options[key.lower()] = value
        else:
            positional.append(arg)
    return positional, options


def split_pipes(args: list[str]) -> list[str]:
    """Join arguments and split on '|' (used for multi-word fields)."""
    return [part.strip() for part in " ".join(args).split("|")]


def parse_id(value: str):
    """Positive integer id, or None."""
    try:
        number = int(value.lstrip("#"))
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None
