"""Small shared utilities (UTC datetimes, timing)."""
