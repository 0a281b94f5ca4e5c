"""Component registry tests."""

import uuid

import pytest

import csvulture
from csvulture import plugins
from csvulture.plugins.csv_reader import CSVReader
from csvulture.plugins.get_from_web import GetFromWeb


@pytest.fixture(autouse=True)
def empty_registry(monkeypatch):
    monkeypatch.setattr(plugins, "_COMPONENT_REGISTRY", {})


class FakeEntryPoint:
    def __init__(self, name, target, value="fake.module:Target"):
        self.name = name
        self.value = value
        self._target = target

    def load(self):
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


def patch_entry_points(monkeypatch, eps):
    import importlib.metadata

    def fake_entry_points(group=None):
        assert group == plugins.ENTRY_POINT_GROUP
        return eps

    monkeypatch.setattr(importlib.metadata, "entry_points", fake_entry_points)


def test_builtins_registered(monkeypatch):
    patch_entry_points(monkeypatch, [])
    plugins.load_plugins()

    assert plugins.get_component("396E2D79-86A3-4D60-B6E0-B72D8B1BD12C") is CSVReader
    assert plugins.get_component(GetFromWeb.COMPONENT_GUID) is GetFromWeb
    assert [i["name"] for i in plugins.list_components()] == ["Get From Web", "Read CSV"]


def test_create_component_by_guid(monkeypatch, settings):
    patch_entry_points(monkeypatch, [])
    plugins.load_plugins()

    reader = plugins.create_component(CSVReader.COMPONENT_GUID, settings=settings)
    assert isinstance(reader, CSVReader)

    with pytest.raises(KeyError):
        plugins.create_component(uuid.uuid4())


def test_entry_point_component_overrides_builtin(monkeypatch):
    class BetterReader(CSVReader):
        NAME = "Better CSV"

    patch_entry_points(monkeypatch, [FakeEntryPoint("better", BetterReader)])
    plugins.load_plugins()

    assert plugins.get_component(CSVReader.COMPONENT_GUID) is BetterReader


def test_broken_entry_points_are_skipped(monkeypatch):
    patch_entry_points(monkeypatch, [
        FakeEntryPoint("broken", ImportError("missing dependency")),
        FakeEntryPoint("not_a_component", object()),
    ])
    plugins.load_plugins()

    assert len(plugins.list_components()) == 2


def test_library_info():
    assert plugins.LIBRARY_INFO.name == "CSVulture"
    assert plugins.LIBRARY_INFO.version == csvulture.__version__
