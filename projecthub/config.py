from pydantic_settings import BaseSettings
from pydantic import Field

class Settings(BaseSettings):
    app_name: str = Field("Student Project Portal", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    api_prefix: str = Field("/api", alias="API_PREFIX")

    secret_key: str = Field("dev-secret-change-me", alias="SECRET_KEY")
    access_token_expire_minutes: int = Field(60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")
    database_url: str = Field("sqlite:///./projecthub.db", alias="DATABASE_URL")

    upload_dir: str = Field("uploads", alias="UPLOAD_DIR")
    max_upload_mb: int = Field(10, alias="MAX_UPLOAD_MB")
    max_upload_files: int = Field(5, alias="MAX_UPLOAD_FILES")

    cors_origins: str = Field("http://localhost:3000", alias="CORS_ORIGINS")

    default_faculty_name: str = Field("Admin User", alias="DEFAULT_FACULTY_NAME")
    default_faculty_email: str = Field("admin@college.edu", alias="DEFAULT_FACULTY_EMAIL")
    default_faculty_password: str = Field("admin123", alias="DEFAULT_FACULTY_PASSWORD")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, alias="LOG_FILE")

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

settings = Settings()
