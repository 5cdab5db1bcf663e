from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "PROPSIM_"}

    # Geocoder (GSI address search, no key needed)
    geocoder_url: str = "https://msearch.gsi.go.jp/address-search/AddressSearch"
    geocoder_timeout: float = 15.0

    # Simulation
    default_horizon_years: int = 35
    simulation_cache_size: int = 128

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]


settings = Settings()
