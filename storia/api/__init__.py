"""Storia autoproduction API."""
