from pathlib import Path
import json

from trade_preview.domain.models import SecurityRecord
from trade_preview.infrastructure.storage.master_store import JsonSecuritiesMasterStore, load_master, save_master


def test_save_and_load_master(tmp_path: Path):
    path = tmp_path / "securities_master.json"
    merged = save_master({"ine002a08106": SecurityRecord("ine002a08106", "Acme", "AAA")}, path=path)
    assert merged["INE002A08106"].issuer == "Acme"
    assert json.loads(path.read_text()) == {"INE002A08106": {"issuer": "Acme", "rating": "AAA"}}

    loaded = load_master(path=path)
    assert loaded["INE002A08106"] == SecurityRecord("INE002A08106", "Acme", "AAA")


def test_save_merges_over_existing_entries(tmp_path: Path):
    store = JsonSecuritiesMasterStore(tmp_path / "master.json")
    store.save({"INE002A08106": SecurityRecord("INE002A08106", "Acme", "AAA")})
    store.save(
        {
            "INE002A08106": SecurityRecord("INE002A08106", "Acme Ltd", "AA+"),
            "INE0ABCDEF12": SecurityRecord("INE0ABCDEF12", "Test Corp", "A"),
        }
    )

    loaded = store.load()
    assert set(loaded) == {"INE002A08106", "INE0ABCDEF12"}
    assert loaded["INE002A08106"].rating == "AA+"


def test_missing_or_corrupt_cache_loads_empty(tmp_path: Path):
    assert load_master(tmp_path / "absent.json") == {}

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json")
    assert load_master(corrupt) == {}


def test_invalid_entries_are_skipped(tmp_path: Path):
    path = tmp_path / "master.json"
    path.write_text(json.dumps({"BAD": {"issuer": "x"}, "INE002A08106": "not a dict"}))
    assert load_master(path) == {"INE002A08106": SecurityRecord("INE002A08106", "", "")}
