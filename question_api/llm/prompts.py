"""Prompt templates and fixed answer texts."""

SYSTEM_PROMPT = "You are a helpful assistant. Provide clear, accurate, and concise answers."

# Returned when the provider fails, times out or returns nothing
FALLBACK_ANSWER = (
    "I apologize, but I am currently experiencing technical difficulties. Please try again later."
)

EMPTY_ANSWER = "I apologize, but I could not generate a response at this time."

MOCK_NOTE = "*Note: This is a mock response for development purposes.*"


def build_messages(question: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": question},
    ]
