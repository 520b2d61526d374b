"""Live quiz buzzer coordinator."""

__version__ = "0.1.0"
