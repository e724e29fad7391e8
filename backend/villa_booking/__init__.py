"""Direct-booking backend for a single holiday rental."""
