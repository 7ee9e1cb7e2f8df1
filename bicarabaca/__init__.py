"""BicaraBaca - read text aloud and turn continuous speech into text."""

__version__ = "0.1.0"
