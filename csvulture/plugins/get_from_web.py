"""Get From Web — body of a single HTTP GET as text."""

import uuid
from typing import Optional

from csvulture.config import Settings, get_settings
from csvulture.host.component import Component, DataAccess
from csvulture.host.params import ParamManager
from csvulture.services.web import fetch_text


class GetFromWeb(Component):
    NAME        = "Get From Web"
    NICKNAME    = "Get"
    DESCRIPTION = "Get data from web"
    CATEGORY    = "CSVulture"
    SUBCATEGORY = "Data"
    COMPONENT_GUID = uuid.UUID("d375f40e-108d-46e2-9979-6ae7b958e120")

    def __init__(self, instance_id: Optional[str] = None, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        super().__init__(instance_id)

    def register_input_params(self, manager: ParamManager) -> None:
        manager.add_text_parameter("URL", "U", "The URL to get")
        manager.add_text_parameter("Authorization Header", "A", "Authorization header", optional=True)

    def register_output_params(self, manager: ParamManager) -> None:
        manager.add_text_parameter("Data", "D", "The retrieved data")

    def solve_instance(self, da: DataAccess) -> None:
        url  = da.get_data("URL") or ""
        auth = da.get_data("Authorization Header") or ""
        da.set_data("Data", fetch_text(url, auth, settings=self.settings))
