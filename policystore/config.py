from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel

DEFAULT_DATABASE = "casbin"
DEFAULT_COLLECTION = "casbin_rule"


class MongoConfig(BaseModel):
    """Connection settings for the MongoDB store."""

    url: str = "mongodb://localhost:27017"
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION


class StoreConfig(BaseModel):
    """Document store settings."""

    backend: Literal["inmemory", "mongo"] = "inmemory"
    mongo: MongoConfig = MongoConfig()


class PolicyStoreConfig(BaseModel):
    """Top-level configuration model."""

    store: StoreConfig = StoreConfig()
    filtered: bool = False


def load_config(path: Optional[str] = None) -> PolicyStoreConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to POLICYSTORE_CONFIG
            env variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("POLICYSTORE_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = PolicyStoreConfig(**data)
    else:
        config = PolicyStoreConfig()

    env_mongo_url = os.getenv("POLICYSTORE_MONGO_URL")
    if env_mongo_url:
        config.store.mongo.url = env_mongo_url
    return config
