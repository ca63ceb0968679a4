"""Bookings app package.

This app encapsulates short-term (daily) bookings: the booking model,
its domain entity and the store the availability engine reads them
through. New bookings are created only through the rental coordinator so
that every write runs behind the property lock.
"""
