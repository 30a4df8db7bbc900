"""LLM client abstraction: Groq, Google AI, and a deterministic mock for unconfigured setups."""

import hashlib
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from question_api.config.settings import get_settings
from question_api.llm.prompts import MOCK_NOTE

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    content: str
    model: str
    tokens_used: int | None = None


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, messages: list[dict], model: str) -> Completion:
        ...


class GroqClient(LLMClient):
    def __init__(self):
        from groq import AsyncGroq
        settings = get_settings()
        self._client = AsyncGroq(api_key=settings.GROQ_API_KEY)

    async def generate(self, messages: list[dict], model: str) -> Completion:
        settings = get_settings()
        response = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            max_tokens=settings.AI_MAX_TOKENS,
            temperature=settings.AI_TEMPERATURE,
        )
        choice = response.choices[0] if response.choices else None
        return Completion(
            content=(choice.message.content if choice else None) or "",
            model=model,
            tokens_used=response.usage.total_tokens if response.usage else None,
        )


class GoogleAIClient(LLMClient):
    def __init__(self):
        import google.generativeai as genai
        settings = get_settings()
        genai.configure(api_key=settings.GOOGLE_AI_API_KEY)
        self._genai = genai

    def _convert_messages(self, messages: list[dict]) -> tuple[str | None, list[dict]]:
        """Convert OpenAI-style messages to Gemini format."""
        system = None
        history = []
        for msg in messages:
            if msg["role"] == "system":
                system = msg["content"]
            else:
                role = "user" if msg["role"] == "user" else "model"
                history.append({"role": role, "parts": [msg["content"]]})
        return system, history

    async def generate(self, messages: list[dict], model: str) -> Completion:
        settings = get_settings()
        system, history = self._convert_messages(messages)
        gen_model = self._genai.GenerativeModel(model, system_instruction=system)
        response = await gen_model.generate_content_async(
            history,
            generation_config={"max_output_tokens": settings.AI_MAX_TOKENS, "temperature": settings.AI_TEMPERATURE},
        )
        usage = response.usage_metadata
        return Completion(
            content=response.text,
            model=model,
            tokens_used=usage.total_token_count if usage else None,
        )


class MockLLMClient(LLMClient):
    """Canned answers keyed on the question's topic. Same question, same answer."""

    MODEL = "mock-model"

    _TOPICS = [
        (
            ("artificial intelligence", "ai"),
            "Artificial Intelligence (AI) refers to the simulation of human intelligence in machines "
            "that are programmed to think and learn. It draws on several approaches:\n\n"
            "1. **Machine Learning**: systems that improve from experience without explicit programming.\n"
            "2. **Neural Networks**: layers of interconnected nodes inspired by biological neurons.\n"
            "3. **Data Processing**: finding patterns in large datasets to make predictions.\n"
            "4. **Algorithms**: procedures that let machines recognize patterns and make decisions.\n\n"
            "Applications include natural language processing, computer vision, robotics and "
            "decision support.",
        ),
        (
            ("machine learning", "ml"),
            "Machine Learning is a subset of artificial intelligence that lets computers learn from "
            "experience. It identifies patterns in data and uses them to make predictions or decisions.",
        ),
        (
            ("programming", "code"),
            "Programming is writing instructions for computers to execute. It combines a programming "
            "language, algorithms and problem solving to build software.",
        ),
    ]

    @staticmethod
    def _mentions(text: str, keyword: str) -> bool:
        if " " in keyword:
            return keyword in text
        return keyword in text.replace("?", " ").replace(",", " ").replace(".", " ").split()

    def _generic(self, question: str) -> str:
        short = question[:50] + ("..." if len(question) > 50 else "")
        templates = [
            f'Thank you for your question about "{short}". This is a simulated answer; in production '
            "a real AI model would respond.",
            f"I understand you're asking about {' '.join(question.split()[:5])}. This is a test answer "
            "generated by the mock AI service.",
            f"Your question has been received and processed. This mock answer shows how the service "
            f"would handle your inquiry about: {short}",
        ]
        # Stable choice so identical questions always get identical answers
        index = int(hashlib.sha256(question.encode()).hexdigest(), 16) % len(templates)
        return templates[index]

    def answer(self, question: str) -> str:
        lowered = question.lower()
        for keywords, text in self._TOPICS:
            if any(self._mentions(lowered, keyword) for keyword in keywords):
                return f"{text}\n\n{MOCK_NOTE}"
        return self._generic(question)

    async def generate(self, messages: list[dict], model: str) -> Completion:
        question = next((m["content"] for m in reversed(messages) if m["role"] == "user"), "")
        content = self.answer(question)
        return Completion(content=content, model=self.MODEL, tokens_used=len(content) // 4)


def _is_configured(api_key: str) -> bool:
    return bool(api_key) and "your-" not in api_key


def resolve_provider() -> str:
    """Pick the provider named by AI_PROVIDER; ``auto`` uses the first configured key."""
    settings = get_settings()
    provider = settings.AI_PROVIDER.lower()
    if provider != "auto":
        return provider
    if _is_configured(settings.GROQ_API_KEY):
        return "groq"
    if _is_configured(settings.GOOGLE_AI_API_KEY):
        return "google"
    return "mock"


def model_for(provider: str) -> str:
    settings = get_settings()
    if provider == "google":
        return settings.GOOGLE_AI_MODEL
    if provider == "mock":
        return MockLLMClient.MODEL
    return settings.AI_MODEL


# Singletons
_clients: dict[str, LLMClient] = {}


def get_llm_client(provider: str) -> LLMClient:
    if provider not in _clients:
        if provider == "groq":
            _clients[provider] = GroqClient()
        elif provider == "google":
            _clients[provider] = GoogleAIClient()
        elif provider == "mock":
            _clients[provider] = MockLLMClient()
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")
    return _clients[provider]


def reset_llm_clients() -> None:
    _clients.clear()
