from decouple import config, Csv

# Database
DATABASE_URL = str(config("DATABASE_URL", default="sqlite:///./yourstylist.db"))

# Security configuration
SECRET_KEY = str(
    config("JWT_SECRET_KEY", default="your-secret-key-change-in-production")
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = config(
    "ACCESS_TOKEN_EXPIRE_MINUTES", default=30, cast=int
)

# AI backend
OPENAI_API_KEY = str(config("OPENAI_API_KEY", default=""))
OPENAI_MODEL = str(config("OPENAI_MODEL", default="gpt-4o-mini"))
OPENAI_IMAGE_MODEL = str(config("OPENAI_IMAGE_MODEL", default="gpt-image-1"))

# Weather
OPENWEATHERMAP_API_KEY = str(config("OPENWEATHERMAP_API_KEY", default=""))
OPENWEATHERMAP_URL = "https://api.openweathermap.org/data/2.5/weather"
WEATHER_TIMEOUT_SECONDS = config("WEATHER_TIMEOUT_SECONDS", default=5.0, cast=float)

# Web
CORS_ORIGINS = config("CORS_ORIGINS", default="", cast=Csv())
LOG_LEVEL = str(config("LOG_LEVEL", default="INFO")).upper()
