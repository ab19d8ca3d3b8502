from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./blacktop.db"
    COMPANY_NAME: str = "Blacktop Solutions LLC"

    # Rate tables: a JSON file replaces the built-in defaults when set
    RATE_TABLE_PATH: str = ""

    # Distance lookup (Google Distance Matrix). Empty key = always use the default distance
    DISTANCE_API_KEY: str = ""
    DISTANCE_API_URL: str = "https://maps.googleapis.com/maps/api/distancematrix/json"
    DISTANCE_TIMEOUT_SECONDS: float = 10.0

    # Admin tokens for price updates
    JWT_SECRET: str = ""  # REQUIRED for /materials/cost-update — fail loudly if missing
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 60

    class Config:
        env_file = ".env"


settings = Settings()
