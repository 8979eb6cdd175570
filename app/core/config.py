"""
App Configuration.

This module defines the global application settings using Pydantic Settings.
It loads configuration variables from environment variables and/or a .env file,
ensuring typed and validated settings for the application.

Attributes:
    settings: The global instance of the Settings class, ready to be imported and used.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application Settings.

    This class defines the configuration for the application, validating
    environment variables against the specified types.

    Attributes:
        PROJECT_NAME: The name of the project (default: "Deploy Checklist Bot").
        GITHUB_APP_ID: The GitHub App ID used to mint installation tokens.
        GITHUB_APP_PRIVATE_KEY: PEM private key of the GitHub App.
        GITHUB_APP_SLUG: App slug; reviews authored by "<slug>[bot]" belong to us.
        GITHUB_WEBHOOK_SECRET: Secret used to verify webhook signatures.
        OPENAI_API_KEY: The API key for accessing OpenAI services.
        ANALYSIS_DEBOUNCE_SECONDS: Delay before re-analysing a PR after a push.
    """

    # Core
    PROJECT_NAME: str = "Deploy Checklist Bot"
    LOG_LEVEL: str = "INFO"

    # GitHub App
    GITHUB_APP_ID: str = ""
    GITHUB_APP_PRIVATE_KEY: str = ""
    GITHUB_APP_SLUG: str = "deploy-checklist-bot"
    GITHUB_WEBHOOK_SECRET: str = ""

    # AI / Model Providers
    OPENAI_API_KEY: str = ""
    LLM_MODEL: str = "gpt-5-mini"
    LLM_MAX_COMPLETION_TOKENS: int = 8000
    LLM_TIMEOUT_SECONDS: float = 120.0

    # Workflow
    ANALYSIS_DEBOUNCE_SECONDS: float = 5.0

    model_config = SettingsConfigDict(
        env_file=".env", env_ignore_empty=True, extra="ignore"
    )


settings = Settings()
