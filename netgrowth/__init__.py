"""Network Growth Engine: relationship scoring and daily outreach queue."""

__version__ = "0.1.0"
