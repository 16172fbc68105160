"""Status lines for the LENDKEEP CLI.

Everything here writes to stderr, leaving stdout for command results
(rental ids, tables) that may be piped elsewhere.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """True if `character` can be encoded with stderr's encoding."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(pair: tuple[str, str]) -> str:
    """Pick the emoji of `pair` when the terminal can show it, else the ASCII."""
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Yellow warning line, e.g. ``⚠️  Item is checked out; you were queued.``"""
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Green success line, e.g. ``✅  Rental returned.``"""
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Red error line, e.g. ``❌  Cannot connect to database.``"""
    click.secho(f"{glyph(ERROR)}  {msg}", fg="red", bold=True, err=True)
