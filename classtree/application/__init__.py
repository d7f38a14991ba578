"""Application layer module.

Contains the application service that runs each taxonomy operation as one
unit of work.
"""

from classtree.application.taxonomy_service import (
    TaxonomyService,
    get_taxonomy_service,
)

__all__ = [
    "TaxonomyService",
    "get_taxonomy_service",
]
