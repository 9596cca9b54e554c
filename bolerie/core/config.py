# bolerie/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações da aplicação, carregadas a partir de variáveis de ambiente
    (ou de um arquivo .env na raiz do projeto).
    """
    PROJECT_NAME: str = "Bolerie API"
    API_V1_STR: str = "/api/v1"

    # --- Banco de Dados ---
    DATABASE_URL: str = "sqlite:///./bolerie.db"

    # --- JWT (Autenticação) ---
    SECRET_KEY: str = "super-secret-key-that-should-be-in-env"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # Dono criado automaticamente na primeira subida, se ainda não houver usuários
    FIRST_OWNER_EMAIL: str | None = None
    FIRST_OWNER_PASSWORD: str | None = None

    # --- Regras de negócio ---
    # 1 ponto de fidelidade a cada N reais gastos
    LOYALTY_CURRENCY_PER_POINT: int = 10
    LOW_STOCK_THRESHOLD: int = 5
    HIGH_STOCK_THRESHOLD: int = 20

    # --- Configurações globais da loja (fallback) ---
    DEFAULT_STORE_NAME: str = "Bolerie"
    DEFAULT_STORE_ADDRESS: str = "Rua das Flores, 123 - Centro"
    DEFAULT_STORE_PHONE: str = "(11) 99999-9999"
    DEFAULT_STORE_EMAIL: str = "contato@bolerie.com"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Instância única das configurações usada em toda a aplicação.
settings = Settings()
