"""
Boundary parsing of raw pool records into PoolSnapshots.

Records come from the external fetch layer, either with canonical field
names (``id``, ``token_a``, ``reserve_a`` ...) or in the pair-data document
shape (``address``, ``token0``, ``reserve0`` ...). Anything malformed fails
fast with a SnapshotError naming the offending record; nothing is coerced
into the graph half-populated.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import DataError, SnapshotError
from .types import PoolSnapshot, short_name
from .utils import get_logger

logger = get_logger(__name__)

DEFAULT_DECIMALS = 9

# Floats above 2**53 cannot hold every integer exactly
MAX_EXACT_FLOAT = 2**53

# Decimals of well-known coin types
KNOWN_DECIMALS: Dict[str, int] = {
    "0x2::sui::SUI": 9,
    "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC": 6,
    "0x375f70cf2ae4c00bf37117d0c85a2c71545e6ee05c4a5c7d282cd66a4504b068::usdt::USDT": 6,
}


class DecimalsCache:
    """
    Token decimals lookup scoped to one scan run.

    Resolution order: values already cached, configured known decimals, the
    optional ``lookup`` callable (e.g., a metadata fetch supplied by the
    caller), then ``default``. Create one per scan and pass it explicitly.
    """

    def __init__(
        self,
        known: Optional[Mapping[str, int]] = None,
        default: int = DEFAULT_DECIMALS,
        lookup: Optional[Callable[[str], Optional[int]]] = None,
    ):
        self.known: Dict[str, int] = dict(KNOWN_DECIMALS)
        self.known.update(known or {})
        self.default = default
        self.lookup = lookup
        self._cache: Dict[str, int] = {}
        self.defaulted: List[str] = []

    def __contains__(self, token: str) -> bool:
        return token in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def set(self, token: str, decimals: int) -> None:
        self._cache[token] = decimals

    def get(self, token: str) -> int:
        if token in self._cache:
            return self._cache[token]

        decimals = self.known.get(token)
        if decimals is None and self.lookup is not None:
            decimals = self.lookup(token)
        if decimals is None:
            logger.warning(
                "Could not resolve decimals for %s, defaulting to %d",
                short_name(token),
                self.default,
            )
            self.defaulted.append(token)
            decimals = self.default

        self._cache[token] = decimals
        return decimals


def _parse_raw_amount(value: Any) -> int:
    """Raw reserves are integers, given as int or a string of digits."""
    if isinstance(value, bool):
        raise ValueError("reserve must be an integer, got bool")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str):
        text = value.strip()
        if not text.isdigit():
            raise ValueError(f"reserve must be a non-negative integer string: {value!r}")
        result = int(text)
    elif isinstance(value, float) and value.is_integer() and abs(value) <= MAX_EXACT_FLOAT:
        result = int(value)
    else:
        raise ValueError(f"reserve must be an integer: {value!r}")
    if result < 0:
        raise ValueError(f"reserve cannot be negative: {result}")
    return result


class PoolRecord(BaseModel):
    """Schema of one raw pool record"""

    id: str = Field(validation_alias=AliasChoices("id", "address", "pool_id"))
    token_a: str = Field(validation_alias=AliasChoices("token_a", "token0"))
    token_b: str = Field(validation_alias=AliasChoices("token_b", "token1"))
    reserve_a: int = Field(validation_alias=AliasChoices("reserve_a", "reserve0"))
    reserve_b: int = Field(validation_alias=AliasChoices("reserve_b", "reserve1"))
    decimals_a: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("decimals_a", "token0_decimals"),
    )
    decimals_b: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("decimals_b", "token1_decimals"),
    )
    symbol_a: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("symbol_a", "token0_short")
    )
    symbol_b: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("symbol_b", "token1_short")
    )

    @field_validator("id", "token_a", "token_b")
    @classmethod
    def validate_identifier(cls, v):
        if not v.strip():
            raise ValueError("identifier cannot be empty")
        return v.strip()

    @field_validator("reserve_a", "reserve_b", mode="before")
    @classmethod
    def validate_reserve(cls, v):
        return _parse_raw_amount(v)

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }


def parse_snapshot(
    record: Mapping[str, Any],
    decimals_cache: Optional[DecimalsCache] = None,
    index: Optional[int] = None,
) -> PoolSnapshot:
    """
    Validate one raw record and build a PoolSnapshot.

    Args:
        record: Raw mapping from the fetch layer
        decimals_cache: Resolves decimals the record does not carry
        index: Position of the record in its document, for error messages

    Returns:
        PoolSnapshot

    Raises:
        SnapshotError: If the record is malformed
    """
    if not isinstance(record, Mapping):
        raise SnapshotError(
            f"Pool record {index} must be a mapping, got {type(record).__name__}",
            record_index=index,
        )
    pool_id = record.get("id", record.get("address", record.get("pool_id")))

    try:
        parsed = PoolRecord.model_validate(dict(record))
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SnapshotError(
            f"Invalid pool record {index} ({pool_id or 'no id'}): {problems}",
            record_index=index,
            pool_id=pool_id,
            details={"errors": e.errors()},
        ) from e

    if parsed.token_a == parsed.token_b:
        raise SnapshotError(
            f"Invalid pool record {index} ({parsed.id}): both sides are {parsed.token_a}",
            record_index=index,
            pool_id=parsed.id,
        )

    cache = decimals_cache if decimals_cache is not None else DecimalsCache()
    decimals_a = parsed.decimals_a
    decimals_b = parsed.decimals_b
    if decimals_a is None:
        decimals_a = cache.get(parsed.token_a)
    else:
        cache.set(parsed.token_a, decimals_a)
    if decimals_b is None:
        decimals_b = cache.get(parsed.token_b)
    else:
        cache.set(parsed.token_b, decimals_b)

    try:
        return PoolSnapshot(
            id=parsed.id,
            token_a=parsed.token_a,
            token_b=parsed.token_b,
            reserve_a=parsed.reserve_a,
            reserve_b=parsed.reserve_b,
            decimals_a=decimals_a,
            decimals_b=decimals_b,
            symbol_a=parsed.symbol_a or "",
            symbol_b=parsed.symbol_b or "",
        )
    except SnapshotError as e:
        # decimals from a lookup callable are only checked here
        raise SnapshotError(
            f"Invalid pool record {index} ({parsed.id}): {e}",
            record_index=index,
            pool_id=parsed.id,
        ) from e


def parse_snapshots(
    records: Iterable[Mapping[str, Any]],
    decimals_cache: Optional[DecimalsCache] = None,
) -> List[PoolSnapshot]:
    """
    Validate a list of raw records.

    Args:
        records: Raw pool records
        decimals_cache: Shared for the whole list; a fresh one is created if
            omitted

    Returns:
        PoolSnapshots in input order

    Raises:
        SnapshotError: On the first malformed record or a repeated pool id
    """
    cache = decimals_cache if decimals_cache is not None else DecimalsCache()
    snapshots = []
    seen_ids: Dict[str, int] = {}

    for index, record in enumerate(records):
        snap = parse_snapshot(record, cache, index)
        if snap.id in seen_ids:
            raise SnapshotError(
                f"Duplicate pool id {snap.id} in records {seen_ids[snap.id]} and {index}",
                record_index=index,
                pool_id=snap.id,
            )
        seen_ids[snap.id] = index
        snapshots.append(snap)

    return snapshots


def load_pairs_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a pair-data JSON document.

    Accepts either ``{"pairs": [...], "timestamp": ...}`` or a bare list of
    records (wrapped into the first shape).

    Raises:
        DataError: If the file is missing, not JSON, or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise DataError(f"Pair data file not found: {path}", source=str(path))

    try:
        with open(path, "r") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise DataError(f"Invalid JSON in {path}: {e}", source=str(path)) from e

    if isinstance(document, list):
        document = {"pairs": document}
    if not isinstance(document, dict) or not isinstance(document.get("pairs"), list):
        raise DataError(
            f"Pair data in {path} must be a list or contain a 'pairs' list",
            source=str(path),
        )
    return document


def load_snapshots(
    path: Union[str, Path],
    decimals_cache: Optional[DecimalsCache] = None,
) -> List[PoolSnapshot]:
    """Read and validate every pool record in a pair-data JSON document."""
    document = load_pairs_document(path)
    snapshots = parse_snapshots(document["pairs"], decimals_cache)
    logger.info(
        "Loaded %d pools from %s (updated %s)",
        len(snapshots),
        path,
        document.get("timestamp", "unknown"),
    )
    return snapshots
