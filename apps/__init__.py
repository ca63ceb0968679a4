"""Django apps of the rentals platform."""
