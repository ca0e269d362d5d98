"""Tests for the chained INI reference data and engine settings."""

import os

import pytest

from calculation.currency import CurrencyPair
from calculation.refdata import ReferenceData, load_chained_ini
from calculation.settings import EngineSettings


def test_builtin_currency_data() -> None:
    """Shipped Currency.ini has minor units, triangulation and historic flags."""
    rd = ReferenceData.load()
    sek = rd.currency_info("SEK")
    assert sek.minor_unit_digits == 2
    assert sek.triangulation_currency == "EUR"
    assert rd.currency_info("DEM").historic
    assert not rd.currency_info("USD").historic


def test_unknown_currency_defaults() -> None:
    """Unknown codes: 0 minor digits, USD triangulation."""
    info = ReferenceData.load().currency_info("XXX")
    assert info.minor_unit_digits == 0
    assert info.triangulation_currency == "USD"


def test_pair_table_and_priority() -> None:
    """Pair table and priority list come from CurrencyPair.ini / CurrencyData.ini."""
    rd = ReferenceData.load()
    assert rd.is_conventional_pair("EUR", "USD")
    assert not rd.is_conventional_pair("USD", "EUR")
    assert rd.is_conventional_pair("USD", "JPY")
    assert rd.priority("EUR") == 1
    assert rd.priority("ZAR") is None


def test_higher_priority_file_wins_per_entry(tmp_path) -> None:
    """Override file changes one entry; the rest of the section comes from the lower file."""
    (tmp_path / "Currency.ini").write_text(
        "[chain]\npriority = 1\nchainNextFile = true\n\n[SEK]\nminorUnitDigits = 3\n"
    )
    rd = ReferenceData.load([str(tmp_path)])
    assert rd.currency_info("SEK").minor_unit_digits == 3
    assert rd.currency_info("SEK").triangulation_currency == "EUR"
    assert rd.currency_info("USD").minor_unit_digits == 2


def test_chain_stops_without_chain_next_file(tmp_path) -> None:
    """chainNextFile = false: lower priority files are not read at all."""
    (tmp_path / "Currency.ini").write_text(
        "[chain]\npriority = 1\nchainNextFile = false\n\n"
        "[SEK]\nminorUnitDigits = 3\ntriangulationCurrency = EUR\n"
    )
    rd = ReferenceData.load([str(tmp_path)])
    assert rd.currency_info("SEK").minor_unit_digits == 3
    assert rd.currency_info("USD").minor_unit_digits == 0


def test_chain_remove_sections(tmp_path) -> None:
    """chainRemoveSections drops a section from every lower priority file."""
    (tmp_path / "Currency.ini").write_text(
        "[chain]\npriority = 1\nchainNextFile = true\nchainRemoveSections = DEM\n"
    )
    rd = ReferenceData.load([str(tmp_path)])
    assert not rd.currency_info("DEM").historic
    assert rd.currency_info("DEM").triangulation_currency == "USD"
    assert rd.currency_info("GBP").minor_unit_digits == 2


def test_priority_override_changes_convention(tmp_path) -> None:
    """A higher priority ordering flips a pair that is not in the pair table."""
    (tmp_path / "CurrencyData.ini").write_text(
        "[chain]\npriority = 1\nchainNextFile = false\n\n"
        "[marketConventionPriority]\nordering = CAD, EUR\n"
    )
    rd = ReferenceData.load([str(tmp_path)])
    assert CurrencyPair.of("EUR", "CAD").to_conventional(rd) == CurrencyPair.of("CAD", "EUR")
    assert CurrencyPair.of("EUR", "CAD").to_conventional() == CurrencyPair.of("EUR", "CAD")


def test_missing_reference_file_raises() -> None:
    """No file with the name anywhere on the path."""
    with pytest.raises(FileNotFoundError, match="Nope.ini"):
        load_chained_ini("Nope.ini")


def test_settings_from_env(monkeypatch) -> None:
    """Settings come from CALC_* environment variables with defaults."""
    monkeypatch.setenv("CALC_MAX_WORKERS", "8")
    monkeypatch.delenv("CALC_MAX_BUILD_WORKERS", raising=False)
    monkeypatch.setenv("CALC_REFDATA_PATH", os.pathsep.join(["/a", "/b"]))
    settings = EngineSettings.from_env()
    assert settings.max_workers == 8
    assert settings.max_build_workers == 4
    assert settings.refdata_path == ("/a", "/b")


def test_settings_reject_non_positive_workers(monkeypatch) -> None:
    """Worker counts must be >= 1."""
    monkeypatch.setenv("CALC_MAX_WORKERS", "0")
    with pytest.raises(ValueError, match="CALC_MAX_WORKERS must be >= 1"):
        EngineSettings.from_env()
