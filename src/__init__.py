"""Chat proxy backend: mediates between the browser client and the upstream LLM."""
