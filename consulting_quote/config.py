from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    COMPANY_NAME: str = "RT Dynamic Business Consulting"
    CURRENCY_SYMBOL: str = "R"

    # Empty means the built-in tables in calculators/pricing_tables.py
    PRICING_TABLE_PATH: str = ""

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
