"""check-the-site — poll a web page and notify once when it changes."""

__version__ = "1.0.1"
