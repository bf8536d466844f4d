from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    app_name: str = "EcoScope"
    app_env: str = "development"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Climate data (NASA POWER daily point)
    power_base_url: str = "https://power.larc.nasa.gov/api/temporal/daily/point"
    power_parameters: str = "T2M_MAX,ALLSKY_SFC_SW_DWN,CLOUD_AMT"
    power_community: str = "SB"
    power_time_standard: str = "UTC"
    power_timeout_connect: float = 5.0
    power_timeout_read: float = 5.0
    power_max_retries: int = 2
    power_backoff_factor: float = 0.5
    history_days: int = 7
    fetch_timeout_s: float = 30.0

    # NDVI imagery fallback chain
    imagery_primary_url: str = "https://proba-v-mep.esa.int/api/v1/wms"
    imagery_primary_layer: str = "NDVI"
    imagery_secondary_url: str = "https://gibs.earthdata.nasa.gov/wms/epsg4326/best/wms.cgi"
    imagery_secondary_layer: str = "MODIS_Terra_NDVI_8Day"
    imagery_tertiary_url: str = "https://modis.ornl.gov/rst/api/v1"
    imagery_tertiary_product: str = "MOD13Q1"
    imagery_timeout_connect: float = 5.0
    imagery_timeout_read: float = 5.0

    # Side channels
    geocoder_url: str = "https://nominatim.openstreetmap.org/search"
    summary_url: str = "https://en.wikipedia.org/api/rest_v1/page/summary/"
    news_url: str = "https://www.nasa.gov/rss/dyn/breaking_news.rss"
    http_user_agent: str = "EcoScope/0.1 (environmental data service)"

    worker_pool_size: int = 4
    prefetch_on_startup: bool = False
    default_location_name: Optional[str] = None

    # .env support and prefix for clarity
    model_config = SettingsConfigDict(
        env_prefix="ECO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
