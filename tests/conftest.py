"""Shared fixtures: in-memory quota storage and fake image services."""

import asyncio
import base64
from typing import List, Optional, Tuple

import pytest

from proheadshot.core.errors import ServiceError
from proheadshot.core.image_io import ImageArtifact, SourceImage
from proheadshot.core.prompt_templates import InstructionPayload
from proheadshot.core.quota_store import InMemoryQuotaStore
from proheadshot.core.rate_limit import QuotaTracker

TODAY = "Mon Oct 19 2026"
TOMORROW = "Tue Oct 20 2026"

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-body"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("utf-8")


class FakeAdapter:
    """Records submissions and returns a canned artifact or raises a canned error."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[Tuple[str, str, InstructionPayload]] = []

    async def submit(self, image_base64, mime_type, payload):
        self.calls.append((image_base64, mime_type, payload))
        if self.error is not None:
            raise self.error
        return ImageArtifact(
            data_url=f"data:image/png;base64,{PNG_B64}",
            mime_type="image/png",
            prompt_used=payload.text,
        )


class ControlledAdapter:
    """Each submission blocks until the test resolves it."""

    def __init__(self):
        self.calls: List[Tuple[InstructionPayload, asyncio.Future]] = []

    async def submit(self, image_base64, mime_type, payload):
        future = asyncio.get_running_loop().create_future()
        self.calls.append((payload, future))
        return await future

    async def wait_for_calls(self, count: int) -> None:
        for _ in range(50):
            if len(self.calls) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} submissions, got {len(self.calls)}")

    def resolve(self, index: int, artifact: ImageArtifact) -> None:
        self.calls[index][1].set_result(artifact)

    def fail(self, index: int, error: ServiceError) -> None:
        self.calls[index][1].set_exception(error)


@pytest.fixture
def store():
    return InMemoryQuotaStore()


@pytest.fixture
def tracker(store):
    return QuotaTracker(store, key="test_usage", limit=10)


@pytest.fixture
def selfie():
    return SourceImage(data=base64.b64encode(b"\xff\xd8selfie").decode(), mime_type="image/jpeg")


@pytest.fixture
def fake_adapter():
    return FakeAdapter()


def make_artifact(label: str) -> ImageArtifact:
    return ImageArtifact(
        data_url=f"data:image/png;base64,{base64.b64encode(label.encode()).decode()}",
        mime_type="image/png",
        prompt_used=label,
    )
