"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class EncodingConfig(BaseSettings):
    """Encoding detection and fallback tuning."""

    model_config = {"env_prefix": "AIONXML_ENCODING_"}

    default_encoding: str = "UTF-8"
    default_has_bom: bool = False
    legacy_encoding: Literal["GBK", "BIG5", "CP949"] = "GBK"
    weak_confidence_threshold: int = 80
    error_penalty: float = 10.0  # 10% invalid characters -> confidence 0


class CacheConfig(BaseSettings):
    """Metadata cache configuration."""

    model_config = {"env_prefix": "AIONXML_CACHE_"}

    ttl_seconds: int = 3600
    key_prefix: str = "encoding_meta"


class InferenceConfig(BaseSettings):
    """Value-domain classification thresholds."""

    model_config = {"env_prefix": "AIONXML_INFERENCE_"}

    max_enum_values: int = 20
    enum_distinct_ratio: float = 0.5
    top_values_limit: int = 100


class WorkerConfig(BaseSettings):
    """Bounded worker pool configuration."""

    model_config = {"env_prefix": "AIONXML_WORKER_"}

    max_workers: int = 8


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration."""

    model_config = {"env_prefix": "AIONXML_DYNAMO_"}

    table_name: str = "aionxml-encoding-metadata"
    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "AIONXML_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    decode_responses: bool = True


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "AIONXML_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    store_backend: Literal["memory", "dynamodb"] = "memory"
    cache_backend: Literal["memory", "redis"] = "memory"

    encoding: EncodingConfig = EncodingConfig()
    cache: CacheConfig = CacheConfig()
    inference: InferenceConfig = InferenceConfig()
    worker: WorkerConfig = WorkerConfig()
    dynamodb: DynamoDBConfig = DynamoDBConfig()
    redis: RedisConfig = RedisConfig()
