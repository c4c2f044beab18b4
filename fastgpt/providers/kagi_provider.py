from typing import Optional

import httpx
from pydantic import ValidationError

from fastgpt.config.models import ClientConfig
from fastgpt.utils.errors import AuthError, DecodeError, HttpError, TransportError
from fastgpt.utils.logging import get_logger

from .base import AnswerPipeline, FastGPTRequest, FastGPTResponse

logger = get_logger(__name__)


class KagiProvider(AnswerPipeline):
    """Kagi FastGPT HTTP API provider"""

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None):
        self.endpoint = config.endpoint
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.timeout)
        self._headers = {
            "Authorization": f"Bot {config.api_key}",
            "Content-Type": "application/json",
        }

    async def answer(self, query: str, cache: bool = True) -> FastGPTResponse:
        """Send one query and parse the structured answer"""
        request = FastGPTRequest(query=query, cache=cache, web_search=True)
        logger.debug(f"POST {self.endpoint} (query {len(query)} chars, cache={cache})")

        try:
            response = await self.client.post(
                self.endpoint,
                headers=self._headers,
                json=request.model_dump(),
            )
        except httpx.HTTPError as e:
            logger.error(f"Request to FastGPT failed: {e}")
            raise TransportError(f"Failed to send request to FastGPT API: {e}") from e

        if not response.is_success:
            body = response.text
            logger.error(f"FastGPT returned status {response.status_code}")
            if response.status_code in (401, 403):
                raise AuthError(response.status_code, body)
            raise HttpError(response.status_code, body)

        try:
            parsed = FastGPTResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(f"Malformed FastGPT response: {e}")
            raise DecodeError(f"Failed to parse response from FastGPT API: {e}") from e

        logger.debug(
            f"Answer {parsed.meta.id} from node {parsed.meta.node} in {parsed.meta.ms}ms"
        )
        return parsed

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
