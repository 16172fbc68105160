"""Interfaces (application boundary) for LENDKEEP.

Defines framework-free application contracts: ABCs shared by the service
layer and adapters (keyed stores, unit of work, notification port, clocks,
ID generators). Business rules stay out of this package.

Dependency rule: this package may import `lendkeep.domain` for entity types
but nothing else from `lendkeep.*`. It may be imported by
`lendkeep.service_layer`, `lendkeep.adapters`, and `lendkeep.bootstrap`.
"""
