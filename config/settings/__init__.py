"""Settings package: base, dev, prod and test."""
