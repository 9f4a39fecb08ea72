from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    TIME_LEN: int = 8
    SHARD_LEN: int = 3
    COUNTER_LEN: int = 2
    SHARD_COUNT: int = 4000
    MAX_COUNTER: int = 999
    EPOCH: int = 0
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="EDID_", extra="ignore")


settings = Settings()
