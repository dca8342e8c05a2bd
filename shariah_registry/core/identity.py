"""
Protocol identity derivation.

identity = keccak256(abi.encodePacked(uint256 chainId, address token))

Both packed parts are fixed width (32 + 20 bytes), so the concatenation is
unambiguous and distinct (chain, token) pairs hash to distinct identities.
"""

from typing import Union

from web3 import Web3


IDENTITY_SIZE = 32
ADDRESS_SIZE = 20
UINT256_MAX = 2**256 - 1

AddressLike = Union[str, bytes]


def normalize_address(address: AddressLike) -> str:
    """
    Normalise a 20-byte address to its EIP-55 checksum form.

    Args:
        address: 20 raw bytes or a 0x-prefixed hex string in any case

    Returns:
        Checksummed address string
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_SIZE:
            raise ValueError(f"Address must be {ADDRESS_SIZE} bytes, got {len(address)}")
        address = Web3.to_hex(bytes(address))
    if not isinstance(address, str) or not Web3.is_address(address.lower()):
        raise ValueError(f"Invalid address: {address!r}")
    return Web3.to_checksum_address(address.lower())


def derive_identity(chain_id: int, token_address: AddressLike) -> bytes:
    """
    Derive the storage key for a protocol.

    Args:
        chain_id: EVM chain id (uint256)
        token_address: Token contract address

    Returns:
        32-byte identity
    """
    if isinstance(chain_id, bool) or not isinstance(chain_id, int):
        raise ValueError(f"chain_id must be an integer, got {chain_id!r}")
    if not 0 <= chain_id <= UINT256_MAX:
        raise ValueError(f"chain_id out of uint256 range: {chain_id}")

    digest = Web3.solidity_keccak(
        ["uint256", "address"],
        [chain_id, normalize_address(token_address)],
    )
    return bytes(digest)


def identity_to_hex(identity: bytes) -> str:
    """Render an identity as a 0x-prefixed hex string."""
    return Web3.to_hex(identity)


def identity_from_hex(value: str) -> bytes:
    """Parse a 0x-prefixed hex identity."""
    try:
        identity = Web3.to_bytes(hexstr=value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid identity hex: {value!r}") from e
    if len(identity) != IDENTITY_SIZE:
        raise ValueError(f"Identity must be {IDENTITY_SIZE} bytes, got {len(identity)}")
    return identity
