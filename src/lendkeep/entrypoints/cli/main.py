"""LENDKEEP CLI entry point.

Defines the top-level ``lendkeep`` command (via Click-Extra), configures
logging for every subcommand, and registers the command groups:

- ``lendkeep db``: forward-only schema management.
- ``lendkeep item`` / ``requester``: catalog registration.
- ``lendkeep rent`` / ``return`` / ``extend`` / ``waitlist``: rentals.
- ``lendkeep history`` / ``overdue``: read-only views.
- ``lendkeep sweep``: overdue notifications.

Examples
    $ lendkeep db upgrade --force
    $ lendkeep rent 01J9Z... 01J9Y...
    $ lendkeep -v sweep --once
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from lendkeep import __version__
from lendkeep.logging import config_console_handler, config_flight_recorder, log_startup

from . import lending
from .db import db as db_group
from .helpers.log_level_parser import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """LENDKEEP command-line interface.

    LENDKEEP coordinates rentals for a shared catalog: items are checked out
    for a fixed loan period, may be extended a limited number of times, and
    requesters who find an item out join a first-come, first-served waiting
    list. A background sweep reminds requesters about overdue rentals.
    """

BASE_LEVEL = logging.WARNING


def effective_level(verbose_count: int, quiet_count: int) -> int:
    """Console level after applying ``-v`` and ``-q`` to the WARNING default."""
    level = BASE_LEVEL - (10 * verbose_count) + (10 * quiet_count)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file (overrides default flight recorder path).",
    default=Path(user_log_dir("lendkeep", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="LENDKEEP_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="LENDKEEP_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records (LENDKEEP_FLIGHT_RECORDER_CAPACITY) at DEBUG "
        "granularity and write them to --log-path when a WARNING/ERROR occurs, "
        "or on exit if --force-flush is set. Console verbosity is unchanged."
    ),
    default=True,
    envvar="LENDKEEP_FLIGHT_RECORDER",
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help=(
        "Write the flight recorder buffer to --log-path on exit even if "
        "nothing at WARNING or above was logged."
    ),
    default=False,
    envvar="LENDKEEP_FORCE_FLUSH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL). Applies to both "
        "console and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L lendkeep.service_layer.sweep=DEBUG) or via LENDKEEP_LOGGER_LEVELS."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    envvar="LENDKEEP_LOGGER_LEVELS",
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def lendkeep(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """LENDKEEP command-line interface."""
    level = effective_level(verbose_count, quiet_count)

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # handlers do the filtering; the root logger passes everything
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path if flight_recorder else None,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


lendkeep.add_command(db_group)
lendkeep.add_command(lending.item)
lendkeep.add_command(lending.requester)
lendkeep.add_command(lending.rent)
lendkeep.add_command(lending.return_)
lendkeep.add_command(lending.extend)
lendkeep.add_command(lending.waitlist)
lendkeep.add_command(lending.history)
lendkeep.add_command(lending.overdue)
lendkeep.add_command(lending.sweep)
