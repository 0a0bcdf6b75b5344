"""
church_api.observability

Observability package.

Responsibilities:
- Structured JSON logging with secret redaction.
- Request context propagation (request id, caller) for log enrichment.
"""

# Package marker.
