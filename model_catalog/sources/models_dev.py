"""models.dev source: provider-keyed JSON catalog."""

from typing import Any

import httpx

from model_catalog.consts import MODELS_DEV_URL
from model_catalog.models.model_catalog import SourceType
from model_catalog.sources.base_source import BaseSource


class ModelsDevSource(BaseSource):
    """Fetches https://models.dev/api.json (``{provider: {"models": {...}}}``)."""

    source_type = SourceType.MODELS_DEV
    url = MODELS_DEV_URL

    def parse_response(self, response: httpx.Response) -> Any:
        return response.json()
