"""HTTP client for the ledger REST gateway.

The peer network is fronted by a REST gateway that holds the gRPC connections
and signs with the caller's identity. Wire contract:

    GET  {base}/status                                            handshake
    POST {base}/channels/{channel}/chaincodes/{chaincode}/submit   {"fn", "args"}
    POST {base}/channels/{channel}/chaincodes/{chaincode}/evaluate {"fn", "args"}

A 2xx response body is the raw contract payload. 502/503 mean the peers were
unreachable and 504 that the gateway gave up waiting. Any other status carries the
contract (or endorsement) error text, either as JSON {"error": "..."} or as
plain text.

One HttpLedgerConnection owns one httpx.AsyncClient; nothing is shared between
connections.
"""

import base64
import logging

import httpx

from src.em_common.errors import (
    LedgerConnectionError,
    LedgerRejectedError,
    LedgerTimeoutError,
)
from src.em_ledger.domain.models import Identity

logger = logging.getLogger("em.ledger")

# gateway or proxy could not reach the peers; distinct from a contract error
_UNAVAILABLE_STATUSES = frozenset({502, 503})


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class HttpLedgerContract:
    def __init__(self, client: httpx.AsyncClient, channel: str, chaincode: str) -> None:
        self._client = client
        self._path = f"/channels/{channel}/chaincodes/{chaincode}"

    async def submit(self, tx_name: str, *args: str) -> bytes:
        return await self._invoke("submit", tx_name, args)

    async def evaluate(self, tx_name: str, *args: str) -> bytes:
        return await self._invoke("evaluate", tx_name, args)

    async def _invoke(self, mode: str, tx_name: str, args: tuple[str, ...]) -> bytes:
        mutating = mode == "submit"
        try:
            response = await self._client.post(
                f"{self._path}/{mode}",
                json={"fn": tx_name, "args": list(args)},
            )
        except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
            # never reached the gateway
            raise LedgerConnectionError(f"{tx_name}: {exc.__class__.__name__}") from None
        except httpx.TimeoutException:
            raise LedgerTimeoutError(tx_name, mutating) from None
        except httpx.TransportError as exc:
            # request may have been delivered; a submit's outcome is unknown
            if mutating:
                logger.warning("Ledger submit %s interrupted: %r", tx_name, exc)
                raise LedgerTimeoutError(
                    tx_name, mutating, reason=f"interrupted ({exc.__class__.__name__})"
                ) from None
            raise LedgerConnectionError(f"{tx_name}: {exc.__class__.__name__}") from None

        if response.is_success:
            return response.content
        detail = _error_detail(response)
        status = response.status_code
        if status == 504:
            raise LedgerTimeoutError(tx_name, mutating, reason="timed out at gateway")
        if status in _UNAVAILABLE_STATUSES:
            logger.warning("Ledger %s %s unavailable (%d): %s", mode, tx_name, status, detail)
            if mutating:
                raise LedgerTimeoutError(tx_name, mutating, reason=f"failed at gateway ({status})")
            raise LedgerConnectionError(f"{tx_name}: gateway unavailable ({status}): {detail}")
        logger.warning("Ledger %s %s rejected (%d): %s", mode, tx_name, status, detail)
        raise LedgerRejectedError(tx_name, detail)


class HttpLedgerConnection:
    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    def get_contract(self, channel: str, chaincode: str) -> HttpLedgerContract:
        return HttpLedgerContract(self._client, channel, chaincode)

    async def close(self) -> None:
        await self._client.aclose()


class HttpLedgerConnector:
    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 5.0,
        call_timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(call_timeout, connect=connect_timeout)
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    async def connect(self, identity: Identity) -> HttpLedgerConnection:
        certificate = base64.b64encode(identity.certificate.encode()).decode()
        client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
            headers={
                "X-Identity": identity.label,
                "X-MSP-ID": identity.msp_id,
                "X-Certificate": certificate,
            },
        )
        try:
            response = await client.get("/status")
            if not response.is_success:
                raise LedgerConnectionError(
                    f"handshake rejected ({response.status_code}): {_error_detail(response)}"
                )
        except httpx.HTTPError as exc:
            await client.aclose()
            raise LedgerConnectionError(f"handshake failed ({exc.__class__.__name__})") from None
        except BaseException:
            # includes cancellation mid-handshake
            await client.aclose()
            raise
        return HttpLedgerConnection(client)
