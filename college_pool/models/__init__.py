# Export the reference dataset model for easy imports
from .base import Base
from .reference_institution import RefInstitution

__all__ = [
    "Base",
    "RefInstitution",
]
