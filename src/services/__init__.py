"""Chat mediation, upstream client and fallback responder."""
