"""VizSNP: from VCF variant calls to annotated, visualizable protein structures."""

__version__ = "0.1.0"
