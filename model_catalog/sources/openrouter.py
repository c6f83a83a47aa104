"""OpenRouter source: public model list."""

from typing import Any

import httpx

from model_catalog.consts import OPENROUTER_URL
from model_catalog.models.model_catalog import SourceType
from model_catalog.sources.base_source import BaseSource


class OpenRouterSource(BaseSource):
    """Fetches the OpenRouter model list (``{"data": [...]}``)."""

    source_type = SourceType.OPENROUTER
    url = OPENROUTER_URL

    def parse_response(self, response: httpx.Response) -> Any:
        return response.json()
