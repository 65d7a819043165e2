"""Tool servers, one frozen ``Registry`` per module."""
