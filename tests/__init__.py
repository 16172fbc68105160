"""LENDKEEP test suite.

Folder taxonomy
- unit/         : Fast checks of one module; in-memory stores and fake clocks.
- contract/     : Behaviour every Store and IdGenerator implementation shares.
- integration/  : SQLite databases, Alembic migrations and the bootstrap wiring.
- e2e/          : The `lendkeep` command driven through Click's CliRunner.
- functional/   : User stories told one CLI invocation at a time.
- fixtures/     : Shared fixtures loaded through `pytest_plugins` (no tests).

Every test is marked with its folder name; Hypothesis tests also carry
`property` and timing-sensitive ones `slow`.
"""
