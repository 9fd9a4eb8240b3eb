"""Employee record manager: validated inserts and a listing page over one MySQL table."""

__version__ = "0.1.0"
