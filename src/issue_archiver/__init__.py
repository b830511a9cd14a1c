"""Issue Archiver: assemble captured articles into METS/ALTO issue packages."""

__version__ = "1.0.0"
