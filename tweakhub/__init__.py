"""tweakhub: compatibility filtering and value resolution for tunable settings."""

__version__ = "0.4.0"
