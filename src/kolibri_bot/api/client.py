"""
Explorer API client for Kolibri Bot.
Handles all block explorer communication with error handling and retries.
"""

import logging
from typing import Any, Dict, List, Optional
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import time
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from ..config import Config
from ..errors import DataShapeError, ExplorerAPIError
from .models import Operation, OperationGroupEntry, OperationsResponse
from .rate_limit import RateLimiter

# Configure logging
logger = logging.getLogger(__name__)


class ExplorerClient:
    """
    Blocking client for the block explorer API.
    Handles retries and turns HTTP failures into ExplorerAPIError.
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.session = self._create_session()

        logger.info("ExplorerClient initialized")
        logger.info(f"Explorer API Base URL: {self.config.EXPLORER_API_BASE_URL}")

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry strategy."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=self.config.API_MAX_RETRIES,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"Accept": "application/json"})

        return session

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True
    )
    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make a GET request with retries.

        Args:
            path: Path relative to the API root
            params: Query parameters

        Returns:
            Parsed JSON body

        Raises:
            ExplorerAPIError: On HTTP error status
            requests.RequestException: When the request cannot be completed
        """
        url = self.config.get_api_url(path)

        logger.debug(f"Making GET request to {url}")
        logger.debug(f"Request params: {params}")

        start_time = time.time()
        response = self.session.get(url, params=params, timeout=self.config.API_TIMEOUT)
        request_duration = time.time() - start_time

        logger.debug(f"Request completed in {request_duration:.2f}s - Status: {response.status_code}")

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"HTTP error for {url}: {e}")
            raise ExplorerAPIError(f"HTTP {response.status_code} error for {url}", response.status_code) from e

        return response.json()

    def get_operations(
        self,
        network: str,
        address: str,
        since_ms: Optional[int] = None
    ) -> List[Operation]:
        """
        Get applied operations of a contract.

        Args:
            network: Explorer network name
            address: Contract address
            since_ms: Only operations at or after this timestamp (milliseconds)

        Returns:
            Operations as listed by the explorer (newest first)
        """
        params: Dict[str, Any] = {"status": "applied"}
        if since_ms is not None:
            params["from"] = since_ms

        data = self._get(f"contract/{network}/{address}/operations", params)
        if not isinstance(data, dict):
            raise DataShapeError(f"Unexpected operations payload for {address}: {type(data).__name__}")

        return OperationsResponse(**data).operations

    def get_storage(self, network: str, address: str) -> Any:
        """Get the decoded storage tree of a contract."""
        return self._get(f"contract/{network}/{address}/storage")

    def get_operation_group(self, op_hash: str) -> List[OperationGroupEntry]:
        """
        Get every content of an operation group.

        Args:
            op_hash: Operation group hash

        Returns:
            List of operation group entries
        """
        data = self._get(f"opg/{op_hash}")
        if not isinstance(data, list):
            raise DataShapeError(f"Unexpected operation group payload for {op_hash}")
        return [OperationGroupEntry(**entry) for entry in data]

    def get_bigmap_keys(self, network: str, ptr: int, offset: int = 0, size: int = 10) -> List[Dict[str, Any]]:
        """Get one page of keys of a big_map."""
        data = self._get(f"bigmap/{network}/{ptr}/keys", {"offset": offset, "size": size})
        if not isinstance(data, list):
            raise DataShapeError(f"Unexpected big_map keys payload for {ptr}")
        return data


class AsyncExplorer:
    """
    Async facade over ExplorerClient.
    Every call goes through the shared explorer rate limiter.
    """

    def __init__(self, client: ExplorerClient, limiter: RateLimiter):
        self.client = client
        self.limiter = limiter

    async def get_operations(self, network: str, address: str, since_ms: Optional[int] = None) -> List[Operation]:
        return await self.limiter.run(self.client.get_operations, network, address, since_ms)

    async def get_storage(self, network: str, address: str) -> Any:
        return await self.limiter.run(self.client.get_storage, network, address)

    async def get_operation_group(self, op_hash: str) -> List[OperationGroupEntry]:
        return await self.limiter.run(self.client.get_operation_group, op_hash)

    async def get_bigmap_keys(self, network: str, ptr: int, offset: int = 0, size: int = 10) -> List[Dict[str, Any]]:
        return await self.limiter.run(self.client.get_bigmap_keys, network, ptr, offset, size)
