from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="studyaid", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")
    # Comma-separated list of allowed browser origins
    cors_origins: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")
    log_level: Optional[str] = Field(default=None, alias="LOG_LEVEL")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


class GenerationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    openrouter_api_key: Optional[str] = Field(default=None, alias="OPENROUTER_API_KEY")

    # Model provider selection: "google" or "openrouter"
    model_provider: str = Field(default="google", alias="MODEL_PROVIDER")
    gemini_model: str = Field(default="gemini-2.0-flash", alias="GEMINI_MODEL")
    openrouter_model: str = Field(
        default="x-ai/grok-code-fast-1", alias="OPENROUTER_MODEL"
    )
    mock_mode: bool = Field(default=False, alias="MOCK_MODE")
    retries: int = Field(default=2, alias="GENERATION_RETRIES")

    @computed_field
    def use_mock(self) -> bool:
        if self.mock_mode:
            return True
        if (self.model_provider or "google").lower() == "openrouter":
            return not self.openrouter_api_key
        return not self.gemini_api_key


class QuizSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    # Feedback pause before auto-advancing, in seconds
    correct_delay: float = Field(default=0.75, alias="QUIZ_CORRECT_DELAY")
    incorrect_delay: float = Field(default=0.5, alias="QUIZ_INCORRECT_DELAY")
    badge_threshold: float = Field(default=0.7, alias="QUIZ_BADGE_THRESHOLD")

    idle_seconds: int = Field(default=1800, alias="QUIZ_SESSION_IDLE_SECONDS")
    sweep_interval: int = Field(default=60, alias="QUIZ_SWEEP_INTERVAL")
    # Oldest in-memory results are dropped past this many
    results_limit: int = Field(default=500, alias="QUIZ_RESULTS_LIMIT")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    generation: GenerationSettings = Field(
        default_factory=lambda: GenerationSettings()
    )
    quiz: QuizSettings = Field(default_factory=lambda: QuizSettings())


settings = Settings()
