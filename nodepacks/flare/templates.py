"""
Request templates - one typed template per resource x operation.

A template fixes the HTTP method, the path, the auth header style and the
parameter schema of an operation. ``build_request`` turns a template plus
one item's parameter values into an OutboundRequest; it performs no I/O.

Encoding rules:
- optional parameters that are None, "" or 0 are left out entirely
- required string parameters must be non-empty; required numbers may be 0
- list parameters are comma-split and stripped, sent as JSON arrays
- json parameters given as text are parsed
- path segments are percent-encoded with no safe characters,
  query strings use standard form encoding ("FLR,SGB" -> "FLR%2CSGB")
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote, urlencode

from pydantic import BaseModel, Field

from src.node_sdk.basenode import NodeOperationError

from .credentials import FlareCredentials


class AuthStyle(str, Enum):
    """How the API key travels; fixed per resource."""
    API_KEY_HEADER = "apiKeyHeader"
    BEARER = "bearer"

    def headers(self, api_key: str) -> Dict[str, str]:
        if self is AuthStyle.BEARER:
            auth = {"Authorization": f"Bearer {api_key}"}
        else:
            auth = {"X-API-Key": api_key}
        return {**auth, "Content-Type": "application/json"}


class ParamKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    LIST = "list"
    JSON = "json"


class ParamLocation(str, Enum):
    PATH = "path"
    QUERY = "query"
    BODY = "body"


@dataclass(frozen=True)
class ParamSpec:
    """Schema of one operation parameter."""
    name: str
    display_name: str
    location: ParamLocation = ParamLocation.QUERY
    kind: ParamKind = ParamKind.STRING
    required: bool = False
    default: Any = ""
    field: Optional[str] = None
    description: Optional[str] = None
    options: Tuple[Tuple[str, str], ...] = ()

    @property
    def wire_name(self) -> str:
        """Name used in the query string or body."""
        return self.field or self.name


@dataclass(frozen=True)
class RequestTemplate:
    """Everything needed to build the request of one operation."""
    resource: str
    operation: str
    display_name: str
    method: str
    path: str
    auth: AuthStyle
    params: Tuple[ParamSpec, ...] = ()

    def params_in(self, location: ParamLocation) -> List[ParamSpec]:
        return [p for p in self.params if p.location is location]


class OutboundRequest(BaseModel):
    """One HTTP request, built fresh for each item."""
    method: str
    url: str
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Any = None


ParameterResolver = Callable[[str, Any], Any]


# ==============================================================================
# Value normalization
# ==============================================================================

def _number(value: float) -> Any:
    """Integral floats become ints so 1640995200.0 renders as 1640995200."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _to_number(spec: ParamSpec, raw: Any) -> Any:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise NodeOperationError(f"Parameter '{spec.name}' must be a number")
    if isinstance(raw, (int, float)):
        return _number(raw)
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return _number(float(text))
    except ValueError as e:
        raise NodeOperationError(f"Parameter '{spec.name}' must be a number, got {raw!r}") from e


def _to_string(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, float):
        return str(_number(raw))
    return str(raw)


def _to_list(raw: Any) -> List[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple)):
        return [_to_string(entry).strip() for entry in raw]
    return [entry.strip() for entry in _to_string(raw).split(",")]


def _to_json(spec: ParamSpec, raw: Any) -> Any:
    if not isinstance(raw, str):
        return raw
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise NodeOperationError(f"Parameter '{spec.name}' is not valid JSON: {e.msg}") from e


def normalize_value(spec: ParamSpec, raw: Any) -> Any:
    """Coerce a raw parameter value to the parameter's kind."""
    if spec.kind is ParamKind.NUMBER:
        return _to_number(spec, raw)
    if spec.kind is ParamKind.LIST:
        return _to_list(raw)
    if spec.kind is ParamKind.JSON:
        return _to_json(spec, raw)
    return _to_string(raw)


def _is_empty(spec: ParamSpec, value: Any) -> bool:
    if value is None:
        return True
    if spec.kind is ParamKind.JSON:
        return False
    if spec.kind is ParamKind.LIST:
        return value == []
    if spec.kind is ParamKind.NUMBER:
        return value == 0
    return value == ""


# ==============================================================================
# Request building
# ==============================================================================

def resolve_params(template: RequestTemplate, resolve: ParameterResolver) -> Dict[str, Any]:
    """
    Read and normalize every parameter of the template for one item.

    Optional empty values are dropped from the result.

    Raises:
        NodeOperationError: required value missing or malformed
    """
    values: Dict[str, Any] = {}
    for spec in template.params:
        value = normalize_value(spec, resolve(spec.name, spec.default))
        if spec.required:
            if value is None or (spec.kind is not ParamKind.NUMBER and _is_empty(spec, value)):
                raise NodeOperationError(f"Parameter '{spec.name}' is required")
        elif _is_empty(spec, value):
            continue
        values[spec.name] = value
    return values


def _query_text(value: Any) -> str:
    return _to_string(value)


def build_request(
    template: RequestTemplate,
    credentials: FlareCredentials,
    resolve: ParameterResolver,
) -> OutboundRequest:
    """
    Build the OutboundRequest of one item.

    Args:
        template: Operation template
        credentials: Batch credentials (read-only)
        resolve: ``resolve(name, default)`` returning the item's raw value
    """
    values = resolve_params(template, resolve)

    segments = {
        spec.name: quote(_to_string(values[spec.name]), safe="")
        for spec in template.params_in(ParamLocation.PATH)
    }
    url = credentials.base_url + template.path.format(**segments)

    query = [
        (spec.wire_name, _query_text(values[spec.name]))
        for spec in template.params_in(ParamLocation.QUERY)
        if spec.name in values
    ]
    if query:
        url = f"{url}?{urlencode(query)}"

    body = None
    body_specs = template.params_in(ParamLocation.BODY)
    if body_specs:
        body = {spec.wire_name: values[spec.name] for spec in body_specs if spec.name in values}

    return OutboundRequest(
        method=template.method,
        url=url,
        headers=template.auth.headers(credentials.api_key),
        body=body,
    )


# ==============================================================================
# Parameter schemas
# ==============================================================================

API_KEY = AuthStyle.API_KEY_HEADER
BEARER = AuthStyle.BEARER

PATH = ParamLocation.PATH
QUERY = ParamLocation.QUERY
BODY = ParamLocation.BODY

NUMBER = ParamKind.NUMBER


def path_param(name: str, display_name: str, description: Optional[str] = None) -> ParamSpec:
    return ParamSpec(name, display_name, location=PATH, required=True, description=description)


INTERVALS = (
    ("1 minute", "1m"),
    ("5 minutes", "5m"),
    ("15 minutes", "15m"),
    ("1 hour", "1h"),
    ("4 hours", "4h"),
    ("1 day", "1d"),
)

ATTESTATION_STATUSES = (
    ("Pending", "pending"),
    ("Confirmed", "confirmed"),
    ("Rejected", "rejected"),
)

SYMBOLS = ParamSpec("symbols", "Symbols", description="Comma-separated list of symbols (e.g., FLR,SGB,BTC)")
TIMESTAMP = ParamSpec("timestamp", "Timestamp", kind=NUMBER, default=0,
                      description="Unix timestamp for historical prices (0 for current)")
SYMBOL_PATH = path_param("symbol", "Symbol", "Price feed symbol (e.g., FLR)")
SYMBOL_QUERY_REQUIRED = ParamSpec("symbol", "Symbol", required=True, description="Price feed symbol")
SYMBOL_QUERY = ParamSpec("symbol", "Symbol", description="Filter by symbol")
START_TIME = ParamSpec("startTime", "Start Time", kind=NUMBER, required=True, default=0,
                       description="Start timestamp (Unix)")
END_TIME = ParamSpec("endTime", "End Time", kind=NUMBER, required=True, default=0,
                     description="End timestamp (Unix)")
INTERVAL = ParamSpec("interval", "Interval", default="1h", options=INTERVALS, description="Time interval")
ADDRESS_PATH = path_param("address", "Address")
REWARD_EPOCH = ParamSpec("rewardEpoch", "Reward Epoch", kind=NUMBER, default=0)
PROVIDER = ParamSpec("provider", "Provider", description="Provider address filter")

EPOCH = ParamSpec("epoch", "Epoch", kind=NUMBER, default=0, description="Specific epoch number")
START_EPOCH = ParamSpec("startEpoch", "Start Epoch", kind=NUMBER, default=0)
END_EPOCH = ParamSpec("endEpoch", "End Epoch", kind=NUMBER, default=0)
AMOUNT = ParamSpec("amount", "Amount", location=BODY, required=True)
PROVIDERS = ParamSpec("providers", "Providers", location=BODY, kind=ParamKind.LIST, required=True,
                      description="Comma-separated list of provider addresses")
DURATION = ParamSpec("duration", "Duration", location=BODY, kind=NUMBER, default=1,
                     description="Duration in epochs")

ROUND_ID = ParamSpec("roundId", "Round ID")
ATTESTATION_STATUS = ParamSpec("status", "Status", options=ATTESTATION_STATUSES,
                               description="Filter by attestation status")
ATTESTATION_ID = path_param("attestationId", "Attestation ID")
ATTESTATION_TYPE = ParamSpec("attestationType", "Attestation Type", location=BODY, required=True)
SOURCE_ID = ParamSpec("sourceId", "Source ID", location=BODY, required=True)
ATTESTATION_DATA = ParamSpec("attestationData", "Attestation Data", location=BODY, kind=ParamKind.JSON,
                             required=True, default="{}", field="data")

FASSET_TYPE = ParamSpec("fAssetType", "FAsset Type", description="Filter by FAsset type (e.g., FXRP)")
STATUS = ParamSpec("status", "Status", description="Filter by status")
AGENT = ParamSpec("agent", "Agent", description="Filter by agent address")
AGENT_PATH = path_param("agent", "Agent")
USER = ParamSpec("user", "User", description="Filter by user address")
FASSET_TYPE_BODY = ParamSpec("fAssetType", "FAsset Type", location=BODY, required=True)
AGENT_BODY = ParamSpec("agent", "Agent", location=BODY, required=True)
UNDERLYING_ADDRESS = ParamSpec("underlyingAddress", "Underlying Address", location=BODY, required=True)

BLOCK_NUMBER = ParamSpec("blockNumber", "Block Number")
LIMIT = ParamSpec("limit", "Limit", kind=NUMBER, default=10, description="Maximum number of results")
BLOCK_HASH = path_param("blockHash", "Block Hash")
ADDRESS_QUERY = ParamSpec("address", "Address", description="Filter by address")
TX_HASH = path_param("txHash", "Transaction Hash")
OFFSET = ParamSpec("offset", "Offset", kind=NUMBER, default=0, description="Number of results to skip")


# ==============================================================================
# Templates
# ==============================================================================

PRICE_FEEDS = "priceFeeds"
DELEGATION = "delegation"
STATE_CONNECTOR = "stateConnector"
SYNTHETIC_ASSETS = "syntheticAssets"
NETWORK_INFO = "networkInfo"

RESOURCE_DISPLAY_NAMES = {
    PRICE_FEEDS: "FTSO Price Feeds",
    DELEGATION: "Delegation",
    STATE_CONNECTOR: "State Connector",
    SYNTHETIC_ASSETS: "FAssets",
    NETWORK_INFO: "Network Info",
}

TEMPLATES: Tuple[RequestTemplate, ...] = (
    # FTSO price feeds
    RequestTemplate(PRICE_FEEDS, "getCurrentPrices", "Get Current Prices", "GET",
                    "/ftso/prices/current", API_KEY, (SYMBOLS, TIMESTAMP)),
    RequestTemplate(PRICE_FEEDS, "getPriceBySymbol", "Get Price By Symbol", "GET",
                    "/ftso/prices/{symbol}", API_KEY, (SYMBOL_PATH,)),
    RequestTemplate(PRICE_FEEDS, "getPriceHistory", "Get Price History", "GET",
                    "/ftso/prices/history", API_KEY,
                    (SYMBOL_QUERY_REQUIRED, START_TIME, END_TIME, INTERVAL)),
    RequestTemplate(PRICE_FEEDS, "getFtsoProviders", "Get FTSO Providers", "GET",
                    "/ftso/providers", API_KEY),
    RequestTemplate(PRICE_FEEDS, "getProviderPrices", "Get Provider Prices", "GET",
                    "/ftso/providers/{address}/prices", API_KEY, (ADDRESS_PATH, SYMBOL_QUERY)),
    RequestTemplate(PRICE_FEEDS, "getFtsoRewards", "Get FTSO Rewards", "GET",
                    "/ftso/rewards", API_KEY, (REWARD_EPOCH, PROVIDER)),

    # Delegation
    RequestTemplate(DELEGATION, "getDelegatorInfo", "Get Delegator Info", "GET",
                    "/delegation/delegators/{address}", BEARER, (ADDRESS_PATH,)),
    RequestTemplate(DELEGATION, "getDelegationProviders", "Get Delegation Providers", "GET",
                    "/delegation/providers", BEARER),
    RequestTemplate(DELEGATION, "getProviderDetails", "Get Provider Details", "GET",
                    "/delegation/providers/{address}", BEARER, (ADDRESS_PATH,)),
    RequestTemplate(DELEGATION, "getDelegationRewards", "Get Delegation Rewards", "GET",
                    "/delegation/rewards/{address}", BEARER, (ADDRESS_PATH, EPOCH)),
    RequestTemplate(DELEGATION, "getDelegationHistory", "Get Delegation History", "GET",
                    "/delegation/history/{address}", BEARER, (ADDRESS_PATH, START_EPOCH, END_EPOCH)),
    RequestTemplate(DELEGATION, "estimateRewards", "Estimate Rewards", "POST",
                    "/delegation/estimate-rewards", BEARER, (AMOUNT, PROVIDERS, DURATION)),

    # State Connector
    RequestTemplate(STATE_CONNECTOR, "getAttestations", "Get Attestations", "GET",
                    "/state-connector/attestations", BEARER, (ROUND_ID, ATTESTATION_STATUS)),
    RequestTemplate(STATE_CONNECTOR, "getAttestationById", "Get Attestation by ID", "GET",
                    "/state-connector/attestations/{attestationId}", BEARER, (ATTESTATION_ID,)),
    RequestTemplate(STATE_CONNECTOR, "submitAttestation", "Submit Attestation", "POST",
                    "/state-connector/attestations", BEARER,
                    (ATTESTATION_TYPE, SOURCE_ID, ATTESTATION_DATA)),
    RequestTemplate(STATE_CONNECTOR, "getAttestationRounds", "Get Attestation Rounds", "GET",
                    "/state-connector/rounds", BEARER, (ROUND_ID,)),
    RequestTemplate(STATE_CONNECTOR, "getAttestationProviders", "Get Attestation Providers", "GET",
                    "/state-connector/providers", BEARER),
    RequestTemplate(STATE_CONNECTOR, "getSupportedTypes", "Get Supported Types", "GET",
                    "/state-connector/types", BEARER),

    # FAssets
    RequestTemplate(SYNTHETIC_ASSETS, "getFAssetAgents", "Get FAsset Agents", "GET",
                    "/fassets/agents", BEARER, (FASSET_TYPE, STATUS)),
    RequestTemplate(SYNTHETIC_ASSETS, "getAgentDetails", "Get Agent Details", "GET",
                    "/fassets/agents/{address}", BEARER, (ADDRESS_PATH,)),
    RequestTemplate(SYNTHETIC_ASSETS, "getMintingRequests", "Get Minting Requests", "GET",
                    "/fassets/minting", BEARER, (STATUS, AGENT, USER)),
    RequestTemplate(SYNTHETIC_ASSETS, "createMintingRequest", "Create Minting Request", "POST",
                    "/fassets/minting", BEARER,
                    (AMOUNT, FASSET_TYPE_BODY, AGENT_BODY, UNDERLYING_ADDRESS)),
    RequestTemplate(SYNTHETIC_ASSETS, "getRedemptionRequests", "Get Redemption Requests", "GET",
                    "/fassets/redemption", BEARER, (STATUS, USER)),
    RequestTemplate(SYNTHETIC_ASSETS, "createRedemptionRequest", "Create Redemption Request", "POST",
                    "/fassets/redemption", BEARER, (AMOUNT, FASSET_TYPE_BODY, UNDERLYING_ADDRESS)),
    RequestTemplate(SYNTHETIC_ASSETS, "getCollateralInfo", "Get Collateral Info", "GET",
                    "/fassets/collateral/{agent}", BEARER, (AGENT_PATH,)),
    RequestTemplate(SYNTHETIC_ASSETS, "getLiquidations", "Get Liquidations", "GET",
                    "/fassets/liquidations", BEARER, (AGENT, STATUS)),

    # Network info
    RequestTemplate(NETWORK_INFO, "getNetworkInfo", "Get Network Info", "GET",
                    "/network/info", API_KEY),
    RequestTemplate(NETWORK_INFO, "getBlocks", "Get Blocks", "GET",
                    "/network/blocks", API_KEY, (BLOCK_NUMBER, LIMIT)),
    RequestTemplate(NETWORK_INFO, "getBlockByHash", "Get Block by Hash", "GET",
                    "/network/blocks/{blockHash}", API_KEY, (BLOCK_HASH,)),
    RequestTemplate(NETWORK_INFO, "getTransactions", "Get Transactions", "GET",
                    "/network/transactions", API_KEY, (ADDRESS_QUERY, BLOCK_NUMBER, LIMIT)),
    RequestTemplate(NETWORK_INFO, "getTransactionByHash", "Get Transaction by Hash", "GET",
                    "/network/transactions/{txHash}", API_KEY, (TX_HASH,)),
    RequestTemplate(NETWORK_INFO, "getAddressBalance", "Get Address Balance", "GET",
                    "/network/addresses/{address}/balance", API_KEY, (ADDRESS_PATH,)),
    RequestTemplate(NETWORK_INFO, "getAddressTransactions", "Get Address Transactions", "GET",
                    "/network/addresses/{address}/transactions", API_KEY, (ADDRESS_PATH, LIMIT, OFFSET)),
)


def templates_for(resource: str) -> Dict[str, RequestTemplate]:
    """Operation name -> template for one resource, in declaration order."""
    return {t.operation: t for t in TEMPLATES if t.resource == resource}


RESOURCES: Tuple[str, ...] = tuple(RESOURCE_DISPLAY_NAMES)


__all__ = [
    "AuthStyle",
    "OutboundRequest",
    "ParamKind",
    "ParamLocation",
    "ParamSpec",
    "RequestTemplate",
    "RESOURCES",
    "RESOURCE_DISPLAY_NAMES",
    "TEMPLATES",
    "build_request",
    "normalize_value",
    "resolve_params",
    "templates_for",
]
