"""Package trustworthiness scoring from GitHub and npm metadata."""

__version__ = "0.1.0"
