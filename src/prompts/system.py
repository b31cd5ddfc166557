"""System prompt sent with every upstream completion request."""

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide accurate, helpful, and detailed "
    "responses to user questions. Be conversational and engaging."
)
