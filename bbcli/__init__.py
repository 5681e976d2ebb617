"""bb - Bitbucket Cloud from the terminal."""

__version__ = "1.0.0"
