"""HuggingFace Hub source: most downloaded models."""

from typing import Any

import httpx

from model_catalog.consts import HUGGINGFACE_PARAMS, HUGGINGFACE_URL
from model_catalog.models.model_catalog import SourceType
from model_catalog.sources.base_source import BaseSource


class HuggingFaceSource(BaseSource):
    """Fetches the top HuggingFace models by downloads (a JSON list)."""

    source_type = SourceType.HUGGINGFACE
    url = HUGGINGFACE_URL
    params = HUGGINGFACE_PARAMS

    def parse_response(self, response: httpx.Response) -> Any:
        return response.json()
