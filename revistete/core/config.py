from pydantic_settings import BaseSettings
from dotenv import load_dotenv
import os

load_dotenv()

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./revistete.db")
    DATABASE_TIMEOUT_SECONDS: int = int(os.getenv("DATABASE_TIMEOUT_SECONDS", "10"))
    
    # JWT (7 days by default)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080"))
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))
    
    # App
    APP_NAME: str = os.getenv("APP_NAME", "ReVistete API")
    DEBUG: bool = os.getenv("DEBUG", "False") == "True"
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")  # comma-separated
    
    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json")
    
    # Media
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "media")
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")
    
    # Reverse geocoding (Nominatim)
    GEOCODING_URL: str = os.getenv("GEOCODING_URL", "https://nominatim.openstreetmap.org/reverse")
    GEOCODING_USER_AGENT: str = os.getenv("GEOCODING_USER_AGENT", "ReVistete-App")
    GEOCODING_TIMEOUT_SECONDS: float = float(os.getenv("GEOCODING_TIMEOUT_SECONDS", "5"))

settings = Settings()
