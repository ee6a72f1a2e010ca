from tripplanner.core.config import Settings
from tripplanner.llm.backends.mock_backend import MockCompletionBackend
from tripplanner.llm.backends.ollama_backend import OllamaCompletionBackend
from tripplanner.llm.backends.openai_backend import OpenAICompletionBackend
from tripplanner.llm.client import CompletionBackend


def build_backend(settings: Settings) -> CompletionBackend:
    provider = settings.llm_provider.lower()
    if provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY required when LLM_PROVIDER=openai")
        return OpenAICompletionBackend(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.completion_timeout,
        )
    if provider == "ollama":
        return OllamaCompletionBackend(
            host=settings.ollama_host,
            model=settings.ollama_model,
            timeout=settings.completion_timeout,
        )
    return MockCompletionBackend()
