"""Configuración de la aplicación mediante variables de entorno."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración cargada desde .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Stockly API"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # JWT
    jwt_secret_key: str = "cambiar-en-produccion-clave-secreta-muy-segura"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 8  # 8 horas
    bcrypt_rounds: int = 12

    # Cookie de sesión (alternativa al header Authorization)
    session_cookie_name: str = "stockly.session-token"
    session_cookie_secure: bool = False

    # PostgreSQL
    postgres_host: str = "127.0.0.1"
    postgres_port: int = 5432
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "stockly"
    database_url: str | None = None
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Política de rutas: listas de prefijos por categoría
    public_paths: list[str] = [
        "/login",
        "/auth/login",
        "/forgot-password",
        "/auth/forgot-password",
        "/favicon.ico",
        "/static",
        "/api",
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
    ]
    vendor_paths: list[str] = ["/ventas"]
    warehouse_paths: list[str] = ["/bodega"]
    admin_paths: list[str] = ["/admin", "/dashboard", "/usuarios"]
    # Orden en que se evalúan las listas por rol; la primera que coincide decide
    route_precedence: list[str] = ["vendedor", "bodega", "admin"]
    login_url: str = "/login"
    forbidden_redirect: str = "/"

    @property
    def database_url_async(self) -> str:
        """URL para SQLAlchemy con driver asyncpg (uso en la app)."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
