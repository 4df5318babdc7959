"""
ORM mappings of the two external stores.

The schemas are owned by other systems; these classes only describe the columns
this service reads. Importing this package registers every mapped class with
its store's metadata.
"""

from .societe import (  # noqa: F401
    Societe,
    Adresse,
    SocieteUser,
    Facturation,
    Contact,
    Entreprise,
    FactureFournisseur,
)
from .legal_unit import LegalUnit  # noqa: F401
