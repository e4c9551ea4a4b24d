# Re-export the main Base class from db.py so every model shares one metadata
from db import Base

__all__ = ["Base"]
