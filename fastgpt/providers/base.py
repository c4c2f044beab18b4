from abc import ABC, abstractmethod
from typing import List

from pydantic import BaseModel, Field, field_validator


class FastGPTRequest(BaseModel):
    """Outbound request body"""

    query: str
    cache: bool = True
    web_search: bool = True


class Meta(BaseModel):
    id: str
    node: str
    ms: int


class Reference(BaseModel):
    title: str
    snippet: str = ""
    url: str


class AnswerData(BaseModel):
    output: str
    references: List[Reference] = Field(default_factory=list)
    tokens: int = 0

    @field_validator("references", mode="before")
    @classmethod
    def _null_references(cls, value):
        return [] if value is None else value


class FastGPTResponse(BaseModel):
    """Structured answer returned by the API"""

    meta: Meta
    data: AnswerData


class AnswerPipeline(ABC):
    """Abstract boundary between a session and the remote answer service"""

    @abstractmethod
    async def answer(self, query: str, cache: bool = True) -> FastGPTResponse:
        """Submit an assembled query.

        Raises:
            TransportError: The service could not be reached.
            HttpError: The service answered with a non-2xx status.
            DecodeError: The response body was malformed.
        """
        pass

    async def aclose(self) -> None:
        """Release any held connections"""
        pass
