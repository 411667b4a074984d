"""Flight Focus - turn focus time into a virtual journey."""

__version__ = "0.1.0"
