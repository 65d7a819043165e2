"""Community feedback server.

No tools or documents have been defined for it yet; the endpoint
answers discovery requests with empty listings.
"""

from __future__ import annotations

from gateway.registry import Registry

registry = Registry("true-review-community-feedback")
