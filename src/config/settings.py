"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SNIPMARK_ prefix (e.g., SNIPMARK_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SNIPMARK_ prefix.

    Examples:
        SNIPMARK_UNRESOLVED_PLACEHOLDER="// missing"
        SNIPMARK_LINK_ATTRIBUTE=data-ref
        SNIPMARK_STRICT_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="SNIPMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Converter configuration
    unresolved_placeholder: str = Field(
        default="// snippet not resolved",
        description="Body emitted when a snippet source cannot be resolved",
    )

    wrap_tag: str = Field(
        default="pre",
        description="Container element wrapped around every converted snippet",
    )

    # Markup configuration
    link_attribute: str = Field(
        default="data-dri",
        description="Anchor attribute carrying the resolved reference id of @link",
    )

    message_prefix: str = Field(
        default="@snippet: ",
        description="Prefix prepended to every diagnostic message",
    )

    # Source resolution
    file_encoding: str = Field(
        default="utf-8",
        description="Encoding used when reading external snippet files",
    )

    class_extension: str = Field(
        default=".java",
        description="File extension appended to class= references",
    )

    # Run configuration
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings as errors",
    )

    def message_make(self, message: str) -> str:
        """
        Prefix a diagnostic message.

        Example:
            >>> AppSettings().message_make("unclosed regions: a")
            '@snippet: unclosed regions: a'
        """
        return f"{self.message_prefix}{message}"

    def container_wrap(self, body: str, attrs: str = "") -> str:
        """
        Wrap a processed snippet body in the container element.

        Args:
            body: Processed snippet text
            attrs: Pre-rendered attribute string (leading space included)

        Returns:
            Wrapped string (e.g., "<pre>body</pre>")
        """
        return f"<{self.wrap_tag}{attrs}>{body}</{self.wrap_tag}>"


# Singleton instance - import this in your code
appsettings = AppSettings()
