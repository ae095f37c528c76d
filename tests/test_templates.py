"""Tests for request templates and request building."""
import pytest

from nodepacks.flare.credentials import FlareCredentials
from nodepacks.flare.templates import (
    RESOURCES,
    TEMPLATES,
    AuthStyle,
    ParamKind,
    ParamLocation,
    ParamSpec,
    RequestTemplate,
    build_request,
    normalize_value,
    templates_for,
)
from src.node_sdk.basenode import NodeOperationError
from tests.helpers import API_KEY, MAINNET, SONGBIRD


CREDS = FlareCredentials(api_key=API_KEY, base_url=MAINNET)


def resolver(values):
    """Resolver backed by a plain dict; missing names fall back to the default."""
    return lambda name, default: values.get(name, default)


def build(resource, operation, **values):
    return build_request(templates_for(resource)[operation], CREDS, resolver(values))


# (resource, operation, parameters, method, url suffix, body)
CASES = [
    # priceFeeds
    ("priceFeeds", "getCurrentPrices", {"symbols": "FLR,SGB", "timestamp": 1700000000},
     "GET", "/ftso/prices/current?symbols=FLR%2CSGB&timestamp=1700000000", None),
    ("priceFeeds", "getPriceBySymbol", {"symbol": "FLR"},
     "GET", "/ftso/prices/FLR", None),
    ("priceFeeds", "getPriceHistory",
     {"symbol": "FLR", "startTime": 1640995200.0, "endTime": 1641081600, "interval": "4h"},
     "GET", "/ftso/prices/history?symbol=FLR&startTime=1640995200&endTime=1641081600&interval=4h", None),
    ("priceFeeds", "getFtsoProviders", {},
     "GET", "/ftso/providers", None),
    ("priceFeeds", "getProviderPrices", {"address": "0xabc", "symbol": "XRP"},
     "GET", "/ftso/providers/0xabc/prices?symbol=XRP", None),
    ("priceFeeds", "getFtsoRewards", {"rewardEpoch": 150, "provider": "0xp"},
     "GET", "/ftso/rewards?rewardEpoch=150&provider=0xp", None),
    # delegation
    ("delegation", "getDelegatorInfo", {"address": "0xd"},
     "GET", "/delegation/delegators/0xd", None),
    ("delegation", "getDelegationProviders", {},
     "GET", "/delegation/providers", None),
    ("delegation", "getProviderDetails", {"address": "0xp"},
     "GET", "/delegation/providers/0xp", None),
    ("delegation", "getDelegationRewards", {"address": "0xd", "epoch": 42},
     "GET", "/delegation/rewards/0xd?epoch=42", None),
    ("delegation", "getDelegationHistory", {"address": "0xd", "startEpoch": 10, "endEpoch": 20},
     "GET", "/delegation/history/0xd?startEpoch=10&endEpoch=20", None),
    ("delegation", "estimateRewards", {"amount": "500", "providers": "0xa", "duration": 2},
     "POST", "/delegation/estimate-rewards", {"amount": "500", "providers": ["0xa"], "duration": 2}),
    # stateConnector
    ("stateConnector", "getAttestations", {"roundId": "7"},
     "GET", "/state-connector/attestations?roundId=7", None),
    ("stateConnector", "getAttestationById", {"attestationId": "att-1"},
     "GET", "/state-connector/attestations/att-1", None),
    ("stateConnector", "submitAttestation",
     {"attestationType": "Payment", "sourceId": "BTC", "attestationData": '{"txId": "0x1"}'},
     "POST", "/state-connector/attestations",
     {"attestationType": "Payment", "sourceId": "BTC", "data": {"txId": "0x1"}}),
    ("stateConnector", "getAttestationRounds", {"roundId": "9"},
     "GET", "/state-connector/rounds?roundId=9", None),
    ("stateConnector", "getAttestationProviders", {},
     "GET", "/state-connector/providers", None),
    ("stateConnector", "getSupportedTypes", {},
     "GET", "/state-connector/types", None),
    # syntheticAssets
    ("syntheticAssets", "getFAssetAgents", {"fAssetType": "FXRP", "status": "active"},
     "GET", "/fassets/agents?fAssetType=FXRP&status=active", None),
    ("syntheticAssets", "getAgentDetails", {"address": "0xag"},
     "GET", "/fassets/agents/0xag", None),
    ("syntheticAssets", "getMintingRequests", {"status": "open", "agent": "0xag", "user": "0xu"},
     "GET", "/fassets/minting?status=open&agent=0xag&user=0xu", None),
    ("syntheticAssets", "createMintingRequest",
     {"amount": "10", "fAssetType": "FXRP", "agent": "0xag", "underlyingAddress": "rXRP"},
     "POST", "/fassets/minting",
     {"amount": "10", "fAssetType": "FXRP", "agent": "0xag", "underlyingAddress": "rXRP"}),
    ("syntheticAssets", "getRedemptionRequests", {"user": "0xu"},
     "GET", "/fassets/redemption?user=0xu", None),
    ("syntheticAssets", "createRedemptionRequest",
     {"amount": "5", "fAssetType": "FBTC", "underlyingAddress": "bc1q"},
     "POST", "/fassets/redemption",
     {"amount": "5", "fAssetType": "FBTC", "underlyingAddress": "bc1q"}),
    ("syntheticAssets", "getCollateralInfo", {"agent": "0xag"},
     "GET", "/fassets/collateral/0xag", None),
    ("syntheticAssets", "getLiquidations", {"agent": "0xag", "status": "done"},
     "GET", "/fassets/liquidations?agent=0xag&status=done", None),
    # networkInfo
    ("networkInfo", "getNetworkInfo", {},
     "GET", "/network/info", None),
    ("networkInfo", "getBlocks", {"blockNumber": "100"},
     "GET", "/network/blocks?blockNumber=100&limit=10", None),
    ("networkInfo", "getBlockByHash", {"blockHash": "0xbh"},
     "GET", "/network/blocks/0xbh", None),
    ("networkInfo", "getTransactions", {"address": "0xa", "limit": 5},
     "GET", "/network/transactions?address=0xa&limit=5", None),
    ("networkInfo", "getTransactionByHash", {"txHash": "0xtx"},
     "GET", "/network/transactions/0xtx", None),
    ("networkInfo", "getAddressBalance", {"address": "0xa"},
     "GET", "/network/addresses/0xa/balance", None),
    ("networkInfo", "getAddressTransactions", {"address": "0xa", "offset": 20},
     "GET", "/network/addresses/0xa/transactions?limit=10&offset=20", None),
]

BEARER_RESOURCES = {"delegation", "stateConnector", "syntheticAssets"}


class TestTemplateTable:
    """Every operation builds its documented request."""

    def test_thirty_three_operations(self):
        assert len(TEMPLATES) == 33
        assert len({(t.resource, t.operation) for t in TEMPLATES}) == 33
        assert {c[:2] for c in CASES} == {(t.resource, t.operation) for t in TEMPLATES}

    def test_every_resource_has_templates(self):
        assert RESOURCES == (
            "priceFeeds", "delegation", "stateConnector", "syntheticAssets", "networkInfo",
        )
        assert [len(templates_for(r)) for r in RESOURCES] == [6, 6, 6, 8, 7]

    @pytest.mark.parametrize(
        "resource,operation,values,method,suffix,body",
        CASES,
        ids=[f"{c[0]}.{c[1]}" for c in CASES],
    )
    def test_builds_request(self, resource, operation, values, method, suffix, body):
        request = build(resource, operation, **values)

        assert request.method == method
        assert request.url == MAINNET + suffix
        assert request.body == body
        assert request.headers["Content-Type"] == "application/json"
        if resource in BEARER_RESOURCES:
            assert request.headers["Authorization"] == f"Bearer {API_KEY}"
            assert "X-API-Key" not in request.headers
        else:
            assert request.headers["X-API-Key"] == API_KEY
            assert "Authorization" not in request.headers


class TestEncodingRules:
    """Parameter encoding: omission, required values, lists, JSON, escaping."""

    def test_current_prices_omits_zero_timestamp(self):
        request = build("priceFeeds", "getCurrentPrices", symbols="FLR,SGB", timestamp=0)

        assert request.method == "GET"
        assert request.url == f"{MAINNET}/ftso/prices/current?symbols=FLR%2CSGB"
        assert request.headers == {"X-API-Key": API_KEY, "Content-Type": "application/json"}

    def test_estimate_rewards_body(self):
        request = build(
            "delegation", "estimateRewards",
            amount="10000", providers="0xabc123, 0xdef456", duration=30,
        )

        assert request.method == "POST"
        assert request.url == f"{MAINNET}/delegation/estimate-rewards"
        assert request.body == {
            "amount": "10000",
            "providers": ["0xabc123", "0xdef456"],
            "duration": 30,
        }
        assert request.headers["Authorization"] == f"Bearer {API_KEY}"

    def test_get_attestations_query(self):
        request = build("stateConnector", "getAttestations", roundId="12345", status="confirmed")

        assert request.url == f"{MAINNET}/state-connector/attestations?roundId=12345&status=confirmed"

    def test_optional_empty_values_omitted(self):
        request = build("syntheticAssets", "getMintingRequests", status="", agent=None, user="0xu")

        assert request.url == f"{MAINNET}/fassets/minting?user=0xu"

    def test_no_query_string_when_all_optional_empty(self):
        request = build("priceFeeds", "getCurrentPrices")

        assert request.url == f"{MAINNET}/ftso/prices/current"

    def test_required_number_zero_is_sent(self):
        request = build("priceFeeds", "getPriceHistory", symbol="FLR", startTime=0, endTime=10)

        assert "startTime=0" in request.url
        assert "endTime=10" in request.url
        assert request.url.endswith("interval=1h")

    def test_required_string_missing_raises(self):
        with pytest.raises(NodeOperationError) as exc_info:
            build("priceFeeds", "getPriceBySymbol", symbol="")

        assert exc_info.value.message == "Parameter 'symbol' is required"

    def test_required_number_missing_raises(self):
        with pytest.raises(NodeOperationError, match="Parameter 'endTime' is required"):
            build("priceFeeds", "getPriceHistory", symbol="FLR", startTime=1, endTime=None)

    def test_required_list_empty_raises(self):
        with pytest.raises(NodeOperationError, match="Parameter 'providers' is required"):
            build("delegation", "estimateRewards", amount="1", providers="")

    def test_non_numeric_number_raises(self):
        with pytest.raises(NodeOperationError, match="must be a number"):
            build("networkInfo", "getBlocks", limit="ten")

    def test_numeric_string_is_normalized(self):
        request = build("networkInfo", "getBlocks", limit="25")

        assert request.url == f"{MAINNET}/network/blocks?limit=25"

    def test_fractional_number_kept(self):
        request = build("delegation", "estimateRewards", amount="1", providers="0xa", duration=1.5)

        assert request.body["duration"] == 1.5

    def test_path_segment_percent_encoded(self):
        request = build("priceFeeds", "getPriceBySymbol", symbol="FLR/USD ?")

        assert request.url == f"{MAINNET}/ftso/prices/FLR%2FUSD%20%3F"

    def test_invalid_attestation_json_raises(self):
        with pytest.raises(NodeOperationError, match="not valid JSON"):
            build(
                "stateConnector", "submitAttestation",
                attestationType="Payment", sourceId="BTC", attestationData="{not json",
            )

    def test_attestation_data_dict_passes_through(self):
        request = build(
            "stateConnector", "submitAttestation",
            attestationType="Payment", sourceId="BTC", attestationData={"a": [1, 2]},
        )

        assert request.body["data"] == {"a": [1, 2]}

    def test_attestation_data_empty_array_is_sent(self):
        request = build(
            "stateConnector", "submitAttestation",
            attestationType="Payment", sourceId="BTC", attestationData="[]",
        )

        assert request.body["data"] == []

    def test_attestation_data_empty_object_is_sent(self):
        request = build(
            "stateConnector", "submitAttestation",
            attestationType="Payment", sourceId="BTC", attestationData={},
        )

        assert request.body["data"] == {}

    def test_attestation_data_defaults_to_empty_object(self):
        request = build(
            "stateConnector", "submitAttestation", attestationType="Payment", sourceId="BTC",
        )

        assert request.body["data"] == {}

    def test_base_url_from_credentials(self):
        creds = FlareCredentials(apiKey=API_KEY, baseUrl=SONGBIRD)
        request = build_request(
            templates_for("networkInfo")["getNetworkInfo"], creds, resolver({}),
        )

        assert request.url == f"{SONGBIRD}/network/info"


class TestNormalizeValue:
    """Coercion of raw parameter values."""

    def test_list_split_and_stripped(self):
        spec = ParamSpec("providers", "Providers", kind=ParamKind.LIST)

        assert normalize_value(spec, " a ,b,, c") == ["a", "b", "", "c"]

    def test_list_value_stripped_element_wise(self):
        spec = ParamSpec("providers", "Providers", kind=ParamKind.LIST)

        assert normalize_value(spec, [" a", "b "]) == ["a", "b"]

    def test_integral_float_rendered_as_int(self):
        spec = ParamSpec("startTime", "Start Time", kind=ParamKind.NUMBER)

        value = normalize_value(spec, 1640995200.0)
        assert value == 1640995200
        assert isinstance(value, int)

    def test_string_from_number(self):
        spec = ParamSpec("roundId", "Round ID")

        assert normalize_value(spec, 12345) == "12345"
        assert normalize_value(spec, 7.0) == "7"

    def test_bool_is_not_a_number(self):
        spec = ParamSpec("limit", "Limit", kind=ParamKind.NUMBER)

        with pytest.raises(NodeOperationError):
            normalize_value(spec, True)

    def test_large_integer_string_keeps_precision(self):
        spec = ParamSpec("blockNumber", "Block Number", kind=ParamKind.NUMBER)

        value = normalize_value(spec, "9007199254740993")
        assert value == 9007199254740993
        assert isinstance(value, int)

    def test_exponent_string_parsed_as_number(self):
        spec = ParamSpec("limit", "Limit", kind=ParamKind.NUMBER)

        assert normalize_value(spec, "1e3") == 1000
        assert normalize_value(spec, " 42 ") == 42


class TestAuthStyle:
    def test_bearer_headers(self):
        assert AuthStyle.BEARER.headers("k") == {
            "Authorization": "Bearer k",
            "Content-Type": "application/json",
        }

    def test_api_key_headers(self):
        assert AuthStyle.API_KEY_HEADER.headers("k") == {
            "X-API-Key": "k",
            "Content-Type": "application/json",
        }

    def test_template_is_frozen(self):
        template = TEMPLATES[0]

        with pytest.raises(AttributeError):
            template.path = "/other"

    def test_field_renames_wire_name(self):
        template = RequestTemplate(
            "x", "op", "Op", "POST", "/x", AuthStyle.BEARER,
            (ParamSpec("attestationData", "Data", location=ParamLocation.BODY, field="data"),),
        )
        request = build_request(template, CREDS, resolver({"attestationData": "v"}))

        assert request.body == {"data": "v"}
