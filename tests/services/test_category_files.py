import io
import pytest
import yaml

from config import get_seed_dir
from services.category_files import (
    export_categories,
    load_export,
    load_seed_file,
    seed_categories,
)
from tests.helpers import make_category


SEED_YAML = """
- name: Locations
  description: Places
  color: "#2e7d32"
  children:
    - name: Settlements
    - name: Wilderness
- name: Factions
- description: no name here
"""


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text(SEED_YAML)
    return path


class TestLoadSeedFile:
    """Tests for reading seed trees."""

    def test_loads_entries(self, seed_file):
        """Test that top-level entries are returned as a list."""
        entries = load_seed_file(seed_file)

        assert [e.get("name") for e in entries] == ["Locations", "Factions", None]
        assert len(entries[0]["children"]) == 2

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_seed_file(tmp_path / "nope.yaml")

    def test_not_a_list(self, tmp_path):
        """Test that a mapping at the top level is rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text("name: Locations\n")

        with pytest.raises(ValueError, match="list of categories"):
            load_seed_file(path)

    def test_empty_file(self, tmp_path):
        """Test that an empty file yields no entries."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_seed_file(path) == []

    def test_bundled_seed_parses(self):
        """Test that the shipped starter tree is valid."""
        entries = load_seed_file(get_seed_dir() / "categories.yaml")

        assert [e["name"] for e in entries] == [
            "Locations",
            "Characters",
            "Factions",
            "Templates",
        ]


class TestSeedCategories:
    """Tests for creating categories from a seed tree."""

    def test_creates_tree(self, store, seed_file):
        """Test that nested entries become nested categories."""
        created, skipped = seed_categories(store, load_seed_file(seed_file))

        assert (created, skipped) == (4, 0)
        top = store.children_of("")
        assert [c.name for c in top] == ["Locations", "Factions"]
        assert top[0].color == "#2e7d32"
        assert top[0].description == "Places"
        assert [c.name for c in store.children_of(top[0].id)] == [
            "Settlements",
            "Wilderness",
        ]

    def test_second_run_skips(self, store, seed_file):
        """Test that seeding twice creates nothing new."""
        entries = load_seed_file(seed_file)
        seed_categories(store, entries)

        created, skipped = seed_categories(store, entries)

        assert (created, skipped) == (0, 4)
        assert len(store.categories) == 4

    def test_fills_in_missing_children(self, store):
        """Test that an existing parent receives new children."""
        seed_categories(store, [{"name": "Locations"}])

        created, skipped = seed_categories(
            store, [{"name": "Locations", "children": [{"name": "Dungeons"}]}]
        )

        assert (created, skipped) == (1, 1)
        locations = store.children_of("")[0]
        assert [c.name for c in store.children_of(locations.id)] == ["Dungeons"]

    def test_skips_non_mapping_entries(self, store):
        """Test that bare strings in a seed list are skipped, not fatal."""
        created, skipped = seed_categories(
            store,
            ["Locations", {"name": "Factions", "children": ["Guilds", {"name": "Kingdoms"}]}],
        )

        assert (created, skipped) == (2, 0)
        factions = store.children_of("")[0]
        assert factions.name == "Factions"
        assert [c.name for c in store.children_of(factions.id)] == ["Kingdoms"]

    def test_leaves_store_idle(self, store, seed_file):
        """Test that no draft is left open after seeding."""
        seed_categories(store, load_seed_file(seed_file))

        assert not store.is_editing


class TestExport:
    """Tests for YAML export and import."""

    def test_export_to_string(self):
        """Test that export produces one mapping per category in order."""
        text = export_categories(
            [make_category("b", "Beta", parent_id="a"), make_category("a", "Alpha")]
        )

        data = yaml.safe_load(text)
        assert [item["id"] for item in data] == ["b", "a"]
        assert data[0]["parent_id"] == "a"
        assert list(data[0].keys()) == [
            "id",
            "name",
            "description",
            "color",
            "parent_id",
            "order",
        ]

    def test_export_and_import(self):
        """Test that an exported collection reads back equal."""
        categories = [
            make_category("a", "Alpha", color="#123456"),
            make_category("b", "Beta", parent_id="a", order=3, description="Second"),
        ]
        stream = io.StringIO()

        export_categories(categories, stream)
        stream.seek(0)

        assert load_export(stream) == categories

    def test_import_fills_defaults(self):
        """Test that missing optional keys get defaults."""
        loaded = load_export(io.StringIO("- id: x\n  name: Ex\n  parent_id: null\n"))

        assert loaded[0].parent_id == ""
        assert loaded[0].order == 0
        assert loaded[0].description == ""

    def test_import_null_order(self):
        """Test that a null order is read as 0."""
        loaded = load_export(io.StringIO("- id: a\n  name: A\n  order: null\n"))

        assert loaded[0].order == 0

    def test_import_rejects_mapping(self):
        """Test that a top-level mapping is refused with ValueError."""
        with pytest.raises(ValueError, match="list of categories"):
            load_export(io.StringIO("id: a\nname: A\n"))

    def test_import_rejects_scalar_items(self):
        """Test that a list of strings is refused with ValueError."""
        with pytest.raises(ValueError, match="must be a mapping"):
            load_export(io.StringIO("- a\n- b\n"))

    def test_import_rejects_missing_id(self):
        """Test that an entry without an id is refused with ValueError."""
        with pytest.raises(ValueError, match="no id"):
            load_export(io.StringIO("- name: A\n"))

    @pytest.mark.parametrize("order", ["abc", "1.5", "[1]", "true"])
    def test_import_rejects_bad_order(self, order):
        """Test that an order that is not a whole number is refused."""
        with pytest.raises(ValueError):
            load_export(io.StringIO(f"- id: a\n  name: A\n  order: {order}\n"))

    def test_import_empty(self):
        """Test that an empty file imports nothing."""
        assert load_export(io.StringIO("")) == []
