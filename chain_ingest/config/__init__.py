"""
Configuration management for Chain Ingest.

Loads explorer credentials and storage settings from environment variables
and an optional .env file into one immutable AppConfig value.
"""

from chain_ingest.config.env import load_config
from chain_ingest.config.networks import NETWORKS, AppConfig, Network

__all__ = ["AppConfig", "NETWORKS", "Network", "load_config"]
