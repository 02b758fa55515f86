"""
Signage Storage Package.

- SqlGateway: parameterized SQL execution with a unit-of-work transaction
"""

from signage.storage.gateway import SqlGateway

__all__ = [
    'SqlGateway',
]
