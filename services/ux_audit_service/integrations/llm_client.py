import time

from openai import AsyncOpenAI, OpenAIError

from config.logging_config import get_logger, log_external_api_call
from services.ux_audit_service.config import Settings
from services.ux_audit_service.errors import GenerationFailure

logger = get_logger(__name__)


class AuditRequester:
    """Sends an audit prompt to the chat completions API and returns the raw text."""

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.7):
        self.client = client
        self.model = model
        self.temperature = temperature

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuditRequester":
        # Generation calls are expensive; failures surface instead of being retried.
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.llm_timeout_s,
            max_retries=0,
        )
        return cls(client=client, model=settings.openai_model, temperature=settings.llm_temperature)

    async def submit(self, prompt: str, temperature: float | None = None) -> str:
        started = time.time()
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature if temperature is None else temperature,
            )
        except OpenAIError as e:
            log_external_api_call(logger, "openai", "chat.completions", time.time() - started, None, error=e)
            raise GenerationFailure(f"text generation failed: {type(e).__name__}", detail=str(e)) from e

        log_external_api_call(logger, "openai", "chat.completions", time.time() - started, 200)

        choices = completion.choices or []
        content = choices[0].message.content if choices else None
        if not content:
            raise GenerationFailure("text generation returned no content")
        return content

    async def close(self) -> None:
        await self.client.close()
