"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "NeuraCar"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    # Agent reads an output as "pressed" above this value
    action_threshold: float = 0.5
    # Editor defaults
    default_weight: float = 1.0
    nudge_step: float = 0.01
    new_node_prefix: str = "Hidden"
    new_node_activation: str = "sigmoid"

    model_config = {"env_prefix": "NEURACAR_"}


settings = Settings()
