from __future__ import annotations

import os
from typing import Any

import requests
from pydantic import BaseModel, Field

from srd.fields import get_int, get_list, get_str
from srd.schemas import BatchKind


class SourceError(RuntimeError):
    pass


class ResourceRef(BaseModel):
    index: str = Field(min_length=1)
    name: str = ""
    url: str = ""


class ResourceList(BaseModel):
    count: int = 0
    results: list[ResourceRef] = Field(default_factory=list)


def parse_resource_list(payload: Any) -> ResourceList:
    results = []
    for entry in get_list(payload, "results"):
        index = get_str(entry, "index", default="")
        if not index:
            continue
        results.append(
            ResourceRef(
                index=index,
                name=get_str(entry, "name", default=""),
                url=get_str(entry, "url", default=""),
            )
        )
    return ResourceList(count=get_int(payload, "count", default=len(results)), results=results)


class SRDClient:
    def __init__(
        self,
        *,
        base_url: str | None = None,
        version: str | None = None,
        timeout: int | None = None,
    ) -> None:
        self.base_url = (base_url or os.getenv("SRD_API_URL") or "https://www.dnd5eapi.co").rstrip(
            "/"
        )
        self.version = version or os.getenv("SRD_API_VERSION") or "2014"
        if timeout is None:
            timeout = int(os.getenv("SRD_TIMEOUT", "30"))
        self.timeout = timeout

    def list_url(self, kind: BatchKind) -> str:
        return f"{self.base_url}/api/{self.version}/{kind.value}"

    def detail_url(self, kind: BatchKind, ref: ResourceRef) -> str:
        if ref.url.startswith(("http://", "https://")):
            return ref.url
        if ref.url:
            return f"{self.base_url}/{ref.url.lstrip('/')}"
        return f"{self.list_url(kind)}/{ref.index}"

    def fetch_list(self, kind: BatchKind) -> ResourceList:
        return parse_resource_list(self._get(self.list_url(kind)))

    def fetch_detail(self, kind: BatchKind, ref: ResourceRef) -> Any:
        return self._get(self.detail_url(kind, ref))

    def _get(self, url: str) -> Any:
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SourceError(f"Request to {url} failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise SourceError(f"Invalid JSON from {url}.") from exc
