from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./broker_portal.db"
    JWT_SECRET: str # Must come from the environment or .env
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 30
    REDIS_URL: str = "redis://localhost:6379/0"
    CORS_ORIGINS: str = "*"

    # Subscription pricing
    PRICE_PER_LOCATION: int = 999
    PRICE_CURRENCY: str = "INR"
    SUBSCRIPTION_DAYS: int = 30
    DEFAULT_RADIUS_METERS: int = 5000
    # When False, any active subscription grants access to every location
    LOCATION_ACCESS_ENFORCE_RADIUS: bool = True

    # Third-party lookups
    CSC_API_URL: str = "https://api.countrystatecity.in/v1/countries/IN"
    CSC_API_KEY: str = ""
    BANNER_API_URL: str = "https://asia-south1-starzapp.cloudfunctions.net/EstatexD4P/banners"
    LOOKUP_CACHE_TTL: int = 3600 # 1 hour

    RATE_LIMIT_ENABLED: bool = True
    SCHEDULER_ENABLED: bool = True
    EXPOSE_ERROR_DETAILS: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"

settings = Settings()
