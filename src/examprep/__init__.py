"""Study document ingestion and exam preparation pipeline."""

__version__ = "0.1.0"
