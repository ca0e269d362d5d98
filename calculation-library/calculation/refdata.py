"""
Static currency reference data loaded from INI resources.

Files with the same name found in `calculation/resources/` and in each
directory of CALC_REFDATA_PATH form a chain:
- `[chain] priority` sorts the files, highest first; all of its entries are used
- `chainNextFile = true` lets the next file contribute entries the chain does not have yet
- `chainRemoveSections` lists sections ignored in every lower-priority file

Within a section the higher-priority file wins per entry.
"""

from __future__ import annotations

import configparser
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping

from calculation.settings import EngineSettings

LOGGER = logging.getLogger(__name__)

RESOURCE_DIR = Path(__file__).resolve().parent / "resources"
CURRENCY_INI = "Currency.ini"
PAIR_INI = "CurrencyPair.ini"
CURRENCY_DATA_INI = "CurrencyData.ini"

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_PAIR_RE = re.compile(r"^([A-Z]{3})/([A-Z]{3})$")


@dataclass(frozen=True)
class CurrencyInfo:
    code: str
    minor_unit_digits: int
    triangulation_currency: str
    historic: bool = False


@dataclass(frozen=True)
class _ChainFile:
    path: Path
    priority: int
    chain_next: bool
    remove_sections: frozenset[str]
    sections: dict[str, dict[str, str]]


def _read_chain_file(path: Path) -> _ChainFile:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # type: ignore[assignment, method-assign]
    with path.open("r", encoding="utf-8") as fh:
        parser.read_file(fh)
    chain = parser["chain"] if parser.has_section("chain") else {}
    remove = chain.get("chainRemoveSections", "")
    sections = {
        name: dict(parser[name]) for name in parser.sections() if name != "chain"
    }
    return _ChainFile(
        path=path,
        priority=int(chain.get("priority", "0")),
        chain_next=chain.get("chainNextFile", "false").strip().lower() == "true",
        remove_sections=frozenset(s.strip() for s in remove.split(",") if s.strip()),
        sections=sections,
    )


def load_chained_ini(name: str, search_path: Iterable[str] = ()) -> dict[str, dict[str, str]]:
    """Load and merge every file called `name` on the resource + search path."""
    candidates = [RESOURCE_DIR / name] + [Path(p) / name for p in search_path]
    files = [_read_chain_file(p) for p in candidates if p.is_file()]
    if not files:
        raise FileNotFoundError(f"No reference data file named {name}")
    files.sort(key=lambda f: f.priority, reverse=True)

    merged: dict[str, dict[str, str]] = {}
    removed: set[str] = set()
    for chain_file in files:
        LOGGER.debug("Merging reference data %s (priority %d)", chain_file.path, chain_file.priority)
        for section, props in chain_file.sections.items():
            if section in removed:
                continue
            combined = dict(props)
            combined.update(merged.get(section, {}))
            merged[section] = combined
        if not chain_file.chain_next:
            break
        removed |= chain_file.remove_sections
    return merged


class ReferenceData:
    """Immutable lookup over the currency, pair and ordering tables."""

    def __init__(
        self,
        currencies: Mapping[str, CurrencyInfo],
        pairs: Mapping[tuple[str, str], int],
        ordering: Mapping[str, int],
    ) -> None:
        self._currencies = MappingProxyType(dict(currencies))
        self._pairs = MappingProxyType(dict(pairs))
        self._ordering = MappingProxyType(dict(ordering))

    @classmethod
    def load(cls, search_path: Iterable[str] = ()) -> "ReferenceData":
        search_path = tuple(search_path)
        currencies: dict[str, CurrencyInfo] = {}
        for code, props in load_chained_ini(CURRENCY_INI, search_path).items():
            if not _CURRENCY_RE.match(code):
                continue
            currencies[code] = CurrencyInfo(
                code=code,
                minor_unit_digits=int(props["minorUnitDigits"]),
                triangulation_currency=props.get("triangulationCurrency", "USD"),
                historic=props.get("historic", "false").strip().lower() == "true",
            )

        pairs: dict[tuple[str, str], int] = {}
        for name, props in load_chained_ini(PAIR_INI, search_path).items():
            match = _PAIR_RE.match(name)
            if match:
                pairs[(match.group(1), match.group(2))] = int(props.get("rateDigits", "4"))

        data = load_chained_ini(CURRENCY_DATA_INI, search_path)
        raw = data.get("marketConventionPriority", {}).get("ordering", "")
        codes = [c.strip() for c in raw.split(",") if c.strip()]
        ordering = {code: i + 1 for i, code in enumerate(codes)}

        LOGGER.info(
            "Loaded reference data: %d currencies, %d pairs, %d ordered currencies",
            len(currencies), len(pairs), len(ordering),
        )
        return cls(currencies, pairs, ordering)

    def currency_info(self, code: str) -> CurrencyInfo:
        """Return the currency's data; unknown codes get 0 digits and USD triangulation."""
        info = self._currencies.get(code)
        if info is None:
            return CurrencyInfo(code=code, minor_unit_digits=0, triangulation_currency="USD")
        return info

    def is_conventional_pair(self, base: str, counter: str) -> bool:
        return (base, counter) in self._pairs

    def priority(self, code: str) -> int | None:
        """Position in the market convention ordering (1 is highest), None if unlisted."""
        return self._ordering.get(code)


@lru_cache(maxsize=1)
def default_reference_data() -> ReferenceData:
    """Process-wide reference data, loaded once on first use."""
    return ReferenceData.load(EngineSettings.from_env().refdata_path)
