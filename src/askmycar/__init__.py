"""AskMyCar: a vehicle-specific chat assistant backend."""

__version__ = "1.0.0"
