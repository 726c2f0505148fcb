from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="UX_AUDIT_", extra="ignore")

    port: int = 8002
    environment: str = Field(default="development")
    service_name: str = Field(default="ux_audit_service")
    log_level: str = Field(default="INFO")

    # Required credentials; a missing value aborts startup.
    openai_api_key: str = Field(min_length=1)
    psi_api_key: str = Field(min_length=1)
    database_url: str = Field(min_length=1)

    openai_model: str = Field(default="gpt-4o-mini")
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    llm_timeout_s: float = Field(default=120.0)

    render_engine: str = Field(default="playwright")
    snapshot_timeout_s: float = Field(default=60.0)
    snapshot_region_max_chars: int = Field(default=15000, ge=500)
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
    )

    psi_timeout_s: float = Field(default=15.0)
    psi_strategy: str = Field(default="mobile")

    cors_origins: str = Field(default="http://localhost:3000")

    @field_validator("render_engine")
    @classmethod
    def validate_render_engine(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("playwright", "httpx"):
            raise ValueError("render_engine must be one of ['playwright', 'httpx']")
        return v

    @field_validator("psi_strategy")
    @classmethod
    def validate_psi_strategy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("mobile", "desktop"):
            raise ValueError("psi_strategy must be one of ['mobile', 'desktop']")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


settings = Settings()
