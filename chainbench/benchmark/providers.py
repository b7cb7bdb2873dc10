"""Provider catalog and endpoint construction for the standard test set."""
import base64
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, List, Optional

from chainbench.const import AUTHORIZATION_HEADER
from .exceptions import UnknownProviderError
from .models import EndpointDescriptor, TransportKind


def raw_key_auth(api_key: str) -> Dict[str, str]:
    return {AUTHORIZATION_HEADER: api_key}


def basic_auth(api_key: str) -> Dict[str, str]:
    token = base64.b64encode(f"{api_key}:".encode()).decode()
    return {AUTHORIZATION_HEADER: f"Basic {token}"}


@dataclass(frozen=True)
class ProviderSpec:
    key: str
    name: str
    base_url: str
    transport: TransportKind
    auth: Callable[[str], Dict[str, str]]


@dataclass(frozen=True)
class BenchmarkCase:
    test_id: str
    title: str
    label: str


PROVIDERS: Dict[str, ProviderSpec] = {
    "mobula": ProviderSpec("mobula", "Mobula", "https://api.mobula.io/api", TransportKind.REST, raw_key_auth),
    "covalent": ProviderSpec("covalent", "Covalent (GoldRush)", "https://api.covalenthq.com",
                             TransportKind.REST, basic_auth),
    "codex": ProviderSpec("codex", "Codex", "https://graph.codex.io/graphql", TransportKind.GRAPHQL, raw_key_auth),
}

TEST_ADDRESSES: Dict[str, str] = {
    "VITALIK": "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045",
    "UNISWAP": "0x1a9C8182C09F50C8318d769245beA52c32BE35BC",
    "USDC_ETH": "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    "USDC_BASE": "0x833589fCD6eDb6E08f4c7C32D4f71b1566dA3DFF",
    "CIRCLE_TREASURY": "0x55FE002aefF02F77364de339a1292923A15844B8",
}

TEST_CASES: List[BenchmarkCase] = [
    BenchmarkCase("T1_Portfolio", "WALLET PORTFOLIO SNAPSHOT", "T1 - Portfolio (vitalik.eth)"),
    BenchmarkCase("T2_Transfers", "WALLET TRANSFER FEED", "T2 - Transfers (vitalik.eth)"),
    BenchmarkCase("T4_Holders", "TOKEN HOLDERS SNAPSHOT", "T4 - Holders (USDC)"),
    BenchmarkCase("T5_MarketData", "TOKEN PRICE & MARKET DATA", "T5 - Market Data (USDC)"),
]

TEST_IDS: List[str] = [case.test_id for case in TEST_CASES]

CODEX_PRICE_QUERY = (
    'query { getTokenPrices(inputs: [{ address: "%s", networkId: 1 }]) '
    '{ address networkId priceUsd timestamp } }' % TEST_ADDRESSES["USDC_ETH"]
)


def _endpoint_table(provider: str) -> Dict[str, dict]:
    vitalik = TEST_ADDRESSES["VITALIK"]
    usdc = TEST_ADDRESSES["USDC_ETH"]
    base_url = PROVIDERS[provider].base_url
    if provider == "mobula":
        return {
            "T1_Portfolio": {"url": f"{base_url}/1/wallet/portfolio",
                             "params": {"wallet": vitalik, "blockchains": "ethereum,base,arbitrum"}},
            "T2_Transfers": {"url": f"{base_url}/1/wallet/trades",
                             "params": {"wallet": vitalik, "limit": 100}},
            "T4_Holders": {"url": f"{base_url}/2/token/holder-positions",
                           "params": {"blockchain": "ethereum", "address": usdc, "limit": 100}},
            "T5_MarketData": {"url": f"{base_url}/1/market/data",
                              "params": {"asset": usdc, "blockchain": "ethereum", "shouldFetchPriceChange": "24h"}},
        }
    if provider == "covalent":
        return {
            "T1_Portfolio": {"url": f"{base_url}/v1/eth-mainnet/address/{vitalik}/balances_v2/"},
            "T2_Transfers": {"url": f"{base_url}/v1/eth-mainnet/address/{vitalik}/transactions_v3/",
                             "params": {"page-size": 100}},
            "T4_Holders": {"url": f"{base_url}/v1/eth-mainnet/tokens/{usdc}/token_holders_v2/",
                           "params": {"page-size": 100}},
            "T5_MarketData": {"url": f"{base_url}/v1/pricing/historical_by_addresses_v2/eth-mainnet/usd/{usdc}/"},
        }
    # Codex only serves token prices
    return {"T5_MarketData": {"url": base_url, "query": CODEX_PRICE_QUERY}}


def get_provider(provider: str) -> ProviderSpec:
    try:
        return PROVIDERS[provider]
    except KeyError:
        raise UnknownProviderError(f"Unknown provider '{provider}', expected one of {', '.join(PROVIDERS)}") from None


def get_test_case(test_id: str) -> Optional[BenchmarkCase]:
    return next((case for case in TEST_CASES if case.test_id == test_id), None)


def build_endpoints(provider: str, api_key: str) -> Dict[str, EndpointDescriptor]:
    """
    Endpoint descriptors of every test the provider supports.

    Args:
        provider: Catalog key, e.g. "mobula".
        api_key: The provider's credential, bound into each descriptor's auth.

    Returns:
        Descriptors keyed by test id, in test order.
    """
    spec = get_provider(provider)
    auth = partial(spec.auth, api_key)
    return {
        test_id: EndpointDescriptor(
            provider=provider,
            test_id=test_id,
            transport=spec.transport,
            url=entry["url"],
            auth=auth,
            params=entry.get("params", {}),
            query=entry.get("query"),
        )
        for test_id, entry in _endpoint_table(provider).items()
    }
