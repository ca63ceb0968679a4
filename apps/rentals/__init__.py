"""Rentals app package.

The core of the platform: the availability engine that keeps daily
bookings and monthly leases from colliding, the lease calculator, the
rental request workflow (Pending -> Approved | Rejected | Withdrawn)
and the tenant records an approved request turns into.
"""
