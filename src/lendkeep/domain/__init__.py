"""Domain layer for LENDKEEP.

Contains business rules: entities, value objects, the lending policy and
domain errors. This package is deliberately technology-agnostic.

Dependency rule: do not import from `lendkeep.adapters` or `lendkeep.entrypoints`.
"""
