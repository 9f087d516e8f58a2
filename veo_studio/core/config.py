import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv() # Load variables from .env file

class Settings(BaseSettings):
    # Upstream generation settings
    genai_model: str = os.getenv("GENAI_MODEL", "veo-3.1-exp-1204")
    instruction_template: str = os.getenv(
        "INSTRUCTION_TEMPLATE", "Generate an 8K ultra realistic cinematic video: {prompt}"
    )
    max_call_duration_s: float = float(os.getenv("MAX_CALL_DURATION_S", "300")) # 5 minutes

    # "production" hides stack traces from error responses
    environment: str = os.getenv("ENVIRONMENT", "production")

    # Legacy behaviour: answer with a placeholder when the payload has no recognizable video
    allow_placeholder_fallback: bool = os.getenv("ALLOW_PLACEHOLDER_FALLBACK", "false").lower() in ("1", "true", "yes")
    placeholder_video_url: str = os.getenv("PLACEHOLDER_VIDEO_URL", "/placeholder-video.mp4")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # Where the client session sends its requests
    bridge_url: str = os.getenv("BRIDGE_URL", "http://localhost:8000/generate")

    class Config:
        env_file = '.env'
        env_file_encoding = 'utf-8'
        extra = 'ignore'

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

settings = Settings()
