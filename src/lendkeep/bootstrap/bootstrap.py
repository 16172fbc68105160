"""Wire the coordinator and sweep to concrete adapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lendkeep import config
from lendkeep.adapters.clocks import SystemClock
from lendkeep.adapters.db.engine import make_engine
from lendkeep.adapters.id_generators import ULIDGenerator
from lendkeep.adapters.notifications import LoggingNotifier
from lendkeep.adapters.unit_of_work import SqlAlchemyUnitOfWork
from lendkeep.interfaces.clock import Clock
from lendkeep.interfaces.id_generator import IdGenerator
from lendkeep.interfaces.notifier import NotificationPort
from lendkeep.service_layer.coordinator import RentalCoordinator, UnitOfWorkFactory
from lendkeep.service_layer.sweep import OverdueSweep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """A class to hold application wiring constants."""

    uow_factory: UnitOfWorkFactory
    id_generator: IdGenerator
    coordinator: RentalCoordinator
    sweep: OverdueSweep


def build_uow_factory(url: str) -> UnitOfWorkFactory:
    """Build a factory returning a fresh unit of work over one shared engine."""
    engine = make_engine(url)
    return lambda: SqlAlchemyUnitOfWork(engine)


def bootstrap(
    url: str | None = None,
    *,
    notifier: NotificationPort | None = None,
    clock: Clock | None = None,
    sweep_interval: float | None = None,
) -> AppContainer:
    """Build the application from configuration.

    Args:
        url: Database URL; read from the environment when omitted.
        notifier: Notification transport; defaults to logging each notice.
        clock: Time source; defaults to the system clock in UTC.
        sweep_interval: Seconds between sweep cycles; read from the
            environment when omitted.
    """
    uow_factory = build_uow_factory(url or config.get_db_url())
    notifier = notifier or LoggingNotifier()
    clock = clock or SystemClock()
    id_generator = ULIDGenerator()
    policy = config.get_lending_policy()

    coordinator = RentalCoordinator(
        uow_factory, notifier, clock, id_generator, policy=policy
    )
    sweep = OverdueSweep(
        uow_factory,
        notifier,
        clock,
        interval=sweep_interval or config.get_sweep_interval(),
    )
    logger.debug(
        "Bootstrapped with loan period %s days, %s max extensions, sweep every %ss",
        policy.loan_period_days,
        policy.max_extensions,
        sweep.interval,
    )

    return AppContainer(
        uow_factory=uow_factory,
        id_generator=id_generator,
        coordinator=coordinator,
        sweep=sweep,
    )
