"""Bootstrap (composition root) for LENDKEEP.

Assembles the application at runtime: reads configuration, builds the
engine and unit-of-work factory, and wires the rental coordinator and the
overdue sweep to their adapters.

Import rules:
- Entry points import *this* package for wiring.
- Inner layers must not import `lendkeep.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap, build_uow_factory

__all__ = ["AppContainer", "bootstrap", "build_uow_factory"]
