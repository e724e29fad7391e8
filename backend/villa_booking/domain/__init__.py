"""Pure booking logic: availability, pricing, range validation and the dossier workflow.

Nothing in this package performs I/O. Callers pass in snapshots of bookings,
blocked ranges, pricing rules and settings, plus "today"/"now" where relevant.
"""
