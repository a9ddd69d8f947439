"""Interest rate swap settlement."""
