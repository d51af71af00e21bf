"""
Asset descriptors for the three token standards the AMMs can pool.

On-chain every asset is the pair ``(address, id)``:
- native coin: ``(0x0, 0)``
- ERC20:       ``(token, 0)``
- ERC6909:     ``(multi-token contract, id)``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from eth_utils import to_checksum_address


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# On-chain identity of an asset.
AssetKey = Tuple[str, int]


class AssetStandard(Enum):
    NATIVE = "NATIVE"
    ERC20 = "ERC20"
    ERC6909 = "ERC6909"


def normalize_address(address: str) -> str:
    """Checksum an address; raises ValueError on malformed input."""
    if not isinstance(address, str):
        raise TypeError("address must be a str")
    return to_checksum_address(address)


@dataclass(frozen=True)
class AssetDescriptor:
    standard: AssetStandard
    address: Optional[str] = None
    token_id: Optional[int] = None
    decimals: int = 18
    fee_override: Optional[int] = None
    symbol: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.standard, AssetStandard):
            raise TypeError("standard must be an AssetStandard")
        if not isinstance(self.decimals, int) or isinstance(self.decimals, bool):
            raise TypeError("decimals must be an int")
        if not (0 <= self.decimals <= 255):
            raise ValueError(f"decimals must be in [0, 255]: {self.decimals}")
        if self.fee_override is not None:
            if not isinstance(self.fee_override, int) or isinstance(self.fee_override, bool):
                raise TypeError("fee_override must be an int")
            if self.fee_override < 0:
                raise ValueError(f"fee_override must be non-negative: {self.fee_override}")

        if self.standard is AssetStandard.NATIVE:
            if self.address is not None or self.token_id is not None:
                raise ValueError("native asset must not carry an address or id")
            return

        if self.address is None:
            raise ValueError(f"{self.standard.value} asset requires an address")
        # frozen: bypass __setattr__ to store the checksummed form
        object.__setattr__(self, "address", normalize_address(self.address))

        if self.standard is AssetStandard.ERC20:
            if self.token_id is not None:
                raise ValueError("ERC20 asset must not carry an id")
            return

        if self.token_id is None:
            raise ValueError("ERC6909 asset requires an id")
        if not isinstance(self.token_id, int) or isinstance(self.token_id, bool):
            raise TypeError("token_id must be an int")
        if self.token_id < 0:
            raise ValueError(f"token_id must be non-negative: {self.token_id}")

    @property
    def is_native(self) -> bool:
        return self.standard is AssetStandard.NATIVE

    @property
    def key(self) -> AssetKey:
        """``(address, id)`` as the contracts see it."""
        return (self.address or ZERO_ADDRESS, self.token_id or 0)

    @property
    def label(self) -> str:
        if self.symbol:
            return self.symbol
        if self.is_native:
            return "ETH"
        if self.token_id is None:
            return str(self.address)
        return f"{self.address}#{self.token_id}"


def native(decimals: int = 18) -> AssetDescriptor:
    return AssetDescriptor(AssetStandard.NATIVE, decimals=decimals, symbol="ETH")


def erc20(address: str, decimals: int = 18, *, symbol: Optional[str] = None, fee_override: Optional[int] = None) -> AssetDescriptor:
    return AssetDescriptor(
        AssetStandard.ERC20, address=address, decimals=decimals, symbol=symbol, fee_override=fee_override
    )


def erc6909(
    address: str,
    token_id: int,
    decimals: int = 18,
    *,
    symbol: Optional[str] = None,
    fee_override: Optional[int] = None,
) -> AssetDescriptor:
    return AssetDescriptor(
        AssetStandard.ERC6909,
        address=address,
        token_id=token_id,
        decimals=decimals,
        symbol=symbol,
        fee_override=fee_override,
    )


ETH = native()

USDT_ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
CULT_ADDRESS = "0x0000000000c5dc95539589fbD24BE07c6C14eCa4"
ENS_ADDRESS = "0xC18360217D8F7Ab5e7c516566761Ea12Ce7F9D72"
WLFI_ADDRESS = "0xdA5e1988097297dCdc1f90D4dFE7909e847CBeF6"

USDT = erc20(USDT_ADDRESS, 6, symbol="USDT")
CULT = erc20(CULT_ADDRESS, 18, symbol="CULT")
ENS = erc20(ENS_ADDRESS, 18, symbol="ENS")
WLFI = erc20(WLFI_ADDRESS, 18, symbol="WLFI")

KNOWN_ASSETS = {a.symbol: a for a in (ETH, USDT, CULT, ENS, WLFI)}


def parse_asset(ref: str) -> AssetDescriptor:
    """
    Parse a textual asset reference.

    Accepts a known symbol (``ETH``, ``USDT``, ...), an ERC20 address, or
    ``<address>#<id>`` for an ERC6909 id (decimal or ``0x`` hex).
    """
    if not isinstance(ref, str) or not ref.strip():
        raise ValueError(f"empty asset reference: {ref!r}")
    ref = ref.strip()
    known = KNOWN_ASSETS.get(ref.upper())
    if known is not None:
        return known
    address, sep, token_id = ref.partition("#")
    if sep:
        return erc6909(address, int(token_id, 0))
    return erc20(address)
