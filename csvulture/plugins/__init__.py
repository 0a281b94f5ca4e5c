"""Component registry — built-ins plus third-party components via entry points.

Third-party packages declare:

    [project.entry-points."csvulture.components"]
    my_component = "my_package.components:MyComponent"

and the registry picks them up at load time. Components are keyed by their
COMPONENT_GUID, which is what saved documents refer to, so a GUID must never
change once a component has shipped.
"""

import logging
import uuid
from typing import Optional, Type

from pydantic import BaseModel

from csvulture import __version__
from csvulture.host.component import Component

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "csvulture.components"


class LibraryInfo(BaseModel):
    id:             uuid.UUID
    name:           str
    version:        str
    description:    str
    author_name:    str
    author_contact: str


LIBRARY_INFO = LibraryInfo(
    id=uuid.UUID("315ed962-aed1-4b61-9888-db302891165f"),
    name="CSVulture",
    version=__version__,
    description="A set of tools for working with CSV and other delimited data sets",
    author_name="Andrew Heumann",
    author_contact="https://discourse.mcneel.com/c/grasshopper/human/88",
)

# Registry: component GUID → component class
_COMPONENT_REGISTRY: dict[uuid.UUID, Type[Component]] = {}


def _as_guid(guid: uuid.UUID | str) -> uuid.UUID:
    return guid if isinstance(guid, uuid.UUID) else uuid.UUID(str(guid))


def register_component(component_cls: Type[Component]) -> Type[Component]:
    """Register a component class under its COMPONENT_GUID."""
    guid = component_cls.COMPONENT_GUID
    existing = _COMPONENT_REGISTRY.get(guid)
    if existing is not None and existing is not component_cls:
        logger.warning("[plugins] GUID %s already registered by %s — overwriting", guid, existing.__name__)
    _COMPONENT_REGISTRY[guid] = component_cls
    logger.info("[plugins] Registered component: %s (%s)", component_cls.NAME, guid)
    return component_cls


def get_component(guid: uuid.UUID | str) -> Optional[Type[Component]]:
    return _COMPONENT_REGISTRY.get(_as_guid(guid))


def create_component(guid: uuid.UUID | str, **kwargs) -> Component:
    """Instantiate a registered component; KeyError if the GUID is unknown."""
    component_cls = get_component(guid)
    if component_cls is None:
        raise KeyError(f"No component registered for GUID {guid}")
    return component_cls(**kwargs)


def list_components() -> list[dict]:
    """Metadata of every registered component, sorted by name."""
    return sorted((cls.info() for cls in _COMPONENT_REGISTRY.values()), key=lambda i: i["name"])


def load_plugins() -> None:
    """Discover entry-point components, then register the built-ins not overridden by them."""
    from importlib.metadata import entry_points

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            component_cls = ep.load()
        except Exception as exc:
            logger.error("[plugins] Failed to load plugin '%s': %s", ep.name, exc)
            continue
        if not (isinstance(component_cls, type) and issubclass(component_cls, Component)):
            logger.error("[plugins] Entry point '%s' (%s) is not a Component subclass", ep.name, ep.value)
            continue
        register_component(component_cls)
        logger.info("[plugins] Loaded plugin component: %s from %s", ep.name, ep.value)

    _register_builtins()


def _register_builtins() -> None:
    from csvulture.plugins.csv_reader import CSVReader
    from csvulture.plugins.get_from_web import GetFromWeb

    for component_cls in (CSVReader, GetFromWeb):
        if component_cls.COMPONENT_GUID not in _COMPONENT_REGISTRY:  # plugin overrides win
            register_component(component_cls)
