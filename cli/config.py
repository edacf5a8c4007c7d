"""Configuration for the CLI tool."""

from pydantic import BaseModel, Field


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(default="localhost", description="Server host")
    port: int = Field(default=8080, description="Server port")
    api_prefix: str = Field(default="/api", description="Path prefix of the API routers")
    timeout: float = Field(
        default=60.0, description="Request timeout in seconds (covers the LLM call)"
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}{self.api_prefix}/chat"

    def messages_url(self, conversation_id: str) -> str:
        return f"{self.base_url}{self.api_prefix}/conversations/{conversation_id}/messages"
