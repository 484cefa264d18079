import httpx
from openai import OpenAI, OpenAIError

from comment.application.port.completion_client_port import CompletionClientPort
from comment.domain.exceptions import CompletionFailedError, mask_secrets
from config.settings import OpenAISettings


class OpenAICompletionClient(CompletionClientPort):
    def __init__(
        self,
        settings: OpenAISettings,
        client: OpenAI | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.settings = settings
        # One request per comment: the SDK's built-in retries are turned off.
        self.client = client or OpenAI(api_key=settings.api_key, max_retries=0, http_client=http_client)

    def complete(self, system_message: str, user_message: str) -> str | None:
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": system_message},
                    {"role": "user", "content": user_message},
                ],
                temperature=self.settings.temperature,
                max_completion_tokens=self.settings.max_completion_tokens,
            )
        except OpenAIError as exc:
            message = mask_secrets(str(exc), [self.settings.api_key])
            raise CompletionFailedError(f"OpenAI error: {message}") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content

    def close(self) -> None:
        self.client.close()
