"""Provider clients and the failure-absorbing LLM adapter."""

from .adapter import LLMAdapter  # noqa: F401
from .client import ChatCompletionClient, build_client  # noqa: F401
from .deps import build_llm, create_llm_adapter, get_llm_adapter  # noqa: F401
