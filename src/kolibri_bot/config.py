"""
Configuration module for Kolibri Bot.
Centralizes all configuration settings, environment variables and network constants.
"""

import os
import logging
import logging.handlers
from dataclasses import dataclass
from typing import List, Optional
from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class NetworkConfig:
    """Everything the supervisor needs to watch one network."""
    network: str
    tier: str  # "main" or "test"
    rpc_url: str
    oven_factory: str
    oven_registry: str
    minter: str
    webhook_url: str

    @property
    def is_configured(self) -> bool:
        """False while any contract address still holds a placeholder."""
        for address in (self.oven_factory, self.oven_registry):
            if not address or address.startswith("PLACEHOLDER"):
                return False
        return True


class Config:
    """Main configuration class for the bot."""

    # Notification webhooks (one per network tier, both required)
    DISCORD_WEBHOOK_MAINNET: str = os.getenv("DISCORD_WEBHOOK_MAINNET", "")
    DISCORD_WEBHOOK_TESTNET: str = os.getenv("DISCORD_WEBHOOK_TESTNET", "")

    # Explorer API Settings
    EXPLORER_API_BASE_URL: str = os.getenv("EXPLORER_API_BASE_URL", "https://api.better-call.dev/v1")
    EXPLORER_UI_BASE_URL: str = os.getenv("EXPLORER_UI_BASE_URL", "https://better-call.dev")
    API_TIMEOUT: int = int(os.getenv("API_TIMEOUT", "30"))
    API_MAX_RETRIES: int = int(os.getenv("API_MAX_RETRIES", "3"))

    # Rate limits: (max concurrent requests, min milliseconds between request starts)
    EXPLORER_MAX_CONCURRENT: int = int(os.getenv("EXPLORER_MAX_CONCURRENT", "2"))
    EXPLORER_MIN_TIME_MS: int = int(os.getenv("EXPLORER_MIN_TIME_MS", "100"))
    WEBHOOK_MAX_CONCURRENT: int = int(os.getenv("WEBHOOK_MAX_CONCURRENT", "1"))
    WEBHOOK_MIN_TIME_MS: int = int(os.getenv("WEBHOOK_MIN_TIME_MS", "250"))

    # Watcher Settings
    WATCH_INTERVAL_SECONDS: int = int(os.getenv("WATCH_INTERVAL_SECONDS", str(15 * 60)))
    WATCHER_START_DELAY_MS: int = int(os.getenv("WATCHER_START_DELAY_MS", "250"))

    # Mainnet contracts
    MAINNET_NETWORK: str = os.getenv("MAINNET_NETWORK", "mainnet")
    MAINNET_RPC_URL: str = os.getenv("MAINNET_RPC_URL", "https://rpc.tzbeta.net")
    MAINNET_OVEN_FACTORY: str = os.getenv("MAINNET_OVEN_FACTORY", "KT1Mgy95DVzqVBNYhsW93cyHuB57Q94UFhrh")
    MAINNET_OVEN_REGISTRY: str = os.getenv("MAINNET_OVEN_REGISTRY", "KT1Ldn1XWQmk7J4pYgGFjjwV57Ew8NYvcNtJ")
    MAINNET_MINTER: str = os.getenv("MAINNET_MINTER", "KT1Ty2uAmF5JxWyeGrVpk17MEyzVB8cXs8aJ")

    # Testnet contracts
    TESTNET_NETWORK: str = os.getenv("TESTNET_NETWORK", "florencenet")
    TESTNET_RPC_URL: str = os.getenv("TESTNET_RPC_URL", "https://rpctest.tzbeta.net")
    TESTNET_OVEN_FACTORY: str = os.getenv("TESTNET_OVEN_FACTORY", "PLACEHOLDER_OVEN_FACTORY_ADDRESS")
    TESTNET_OVEN_REGISTRY: str = os.getenv("TESTNET_OVEN_REGISTRY", "PLACEHOLDER_OVEN_REGISTRY_ADDRESS")
    TESTNET_MINTER: str = os.getenv("TESTNET_MINTER", "PLACEHOLDER_MINTER_ADDRESS")

    # Logging Settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    LOG_FILE: str = os.getenv("LOG_FILE", "kolibri_bot.log")
    LOG_MAX_BYTES: int = int(os.getenv("LOG_MAX_BYTES", "10485760"))  # 10MB
    LOG_BACKUP_COUNT: int = int(os.getenv("LOG_BACKUP_COUNT", "5"))

    @classmethod
    def validate(cls) -> None:
        """
        Refuse to start without both notification webhooks.

        Raises:
            ConfigurationError: If either webhook URL is missing
        """
        missing = [
            name for name in ("DISCORD_WEBHOOK_TESTNET", "DISCORD_WEBHOOK_MAINNET")
            if not getattr(cls, name)
        ]
        if missing:
            raise ConfigurationError(f"Must set {' and '.join(missing)}!")

    @classmethod
    def network_configs(cls) -> List[NetworkConfig]:
        """Build the per-network structures handed to the supervisor."""
        return [
            NetworkConfig(
                network=cls.MAINNET_NETWORK,
                tier="main",
                rpc_url=cls.MAINNET_RPC_URL,
                oven_factory=cls.MAINNET_OVEN_FACTORY,
                oven_registry=cls.MAINNET_OVEN_REGISTRY,
                minter=cls.MAINNET_MINTER,
                webhook_url=cls.DISCORD_WEBHOOK_MAINNET,
            ),
            NetworkConfig(
                network=cls.TESTNET_NETWORK,
                tier="test",
                rpc_url=cls.TESTNET_RPC_URL,
                oven_factory=cls.TESTNET_OVEN_FACTORY,
                oven_registry=cls.TESTNET_OVEN_REGISTRY,
                minter=cls.TESTNET_MINTER,
                webhook_url=cls.DISCORD_WEBHOOK_TESTNET,
            ),
        ]

    @classmethod
    def get_api_url(cls, path: str) -> str:
        """
        Build full explorer API URL for a path.

        Args:
            path: Path relative to the API root, e.g. "opg/oo..."

        Returns:
            Full API URL
        """
        return f"{cls.EXPLORER_API_BASE_URL.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def get_operation_url(cls, network: Optional[str], op_hash: Optional[str]) -> str:
        """Link to an operation group in the explorer UI."""
        return f"{cls.EXPLORER_UI_BASE_URL.rstrip('/')}/{network}/opg/{op_hash}/contents"

    @classmethod
    def setup_logging(cls) -> None:
        """
        Configure application logging with file and console handlers.
        """
        # Create logger
        logger = logging.getLogger()
        logger.setLevel(getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO))

        # Clear any existing handlers
        logger.handlers.clear()

        # Create formatter
        formatter = logging.Formatter(cls.LOG_FORMAT)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO))
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        # File handler with rotation
        file_handler = logging.handlers.RotatingFileHandler(
            cls.LOG_FILE,
            maxBytes=cls.LOG_MAX_BYTES,
            backupCount=cls.LOG_BACKUP_COUNT
        )
        file_handler.setLevel(getattr(logging, cls.LOG_LEVEL.upper(), logging.INFO))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        # Reduce noise from external libraries
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)
        logging.getLogger("apprise").setLevel(logging.WARNING)

        logger.info("Logging system initialized")
        logger.info(f"Log level: {cls.LOG_LEVEL}")
        logger.info(f"Log file: {cls.LOG_FILE}")
