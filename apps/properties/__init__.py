"""Properties app package.

This app owns the property record with its rental mode and the
landlord-imposed blocked periods that close a property for a date range.
"""
