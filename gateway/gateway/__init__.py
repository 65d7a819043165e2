"""gateway — survey endpoints and tool servers on one Starlette app."""
