
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    storage_path: str = "./data/local_storage.json"
    history_key: str = "hanmate-conversation-history"
    profile_key: str = "hanmate-user-profile"

    # Memory limits
    max_history: int = 20
    learn_window: int = 10
    concern_window: int = 3
    max_concerns: int = 5
    concern_excerpt_length: int = 50
    summary_history_window: int = 6
    summary_concerns: int = 2
    reply_history_window: int = 10
    learn_every: int = 1

    keywords_config_path: str = "memory_keywords.json"

    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = ""
    llm_model: str = "gpt-4o-mini"
    llm_max_tokens: int = 150
    llm_temperature: float = 0.7
    llm_timeout: float = 30.0
    mock_delay_min: float = 1.0
    mock_delay_max: float = 2.0

    default_locale: str = "ko"
    speech_rate: float = 0.9

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "HANMATE_"
        extra = "ignore"


settings = Settings()
