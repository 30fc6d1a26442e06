"""GodsEye web API (Flask)."""
