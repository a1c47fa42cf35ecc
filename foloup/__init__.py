"""FoloUp: AI interview platform and ATS resume matching service."""

__version__ = "0.1.0"
