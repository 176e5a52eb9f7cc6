"""Shared fixtures for the dental chatbot tests."""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from dentalbot.models.analysis import AnalysisResult
from dentalbot.services.chatbot_service import ChatbotService
from dentalbot.services.dialogue_engine import DialogueEngine
from dentalbot.services.session_store import SessionStore


SAMPLE_ANALYSIS = {
    "diagnosis": "Sâu răng hàm dưới",
    "confidence": 0.92,
    "severity": "medium",
    "estimatedCost": {"min": 1500000, "max": 3000000, "currency": "VND"},
    "recommendations": ["Trám răng", "Vệ sinh răng miệng 2 lần/ngày"],
    "treatmentPlan": {
        "immediate": ["Giảm đau"],
        "shortTerm": ["Trám răng"],
        "longTerm": ["Khám định kỳ 6 tháng"],
    },
    "riskFactors": ["Ăn nhiều đồ ngọt"],
}


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class FakeAnalysisClient:
    """Stands in for ImageAnalysisClient; returns a result or raises."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def analyze(self, image_path):
        self.calls.append(image_path)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def analysis_result():
    return AnalysisResult.model_validate(SAMPLE_ANALYSIS)


@pytest.fixture
def analysis_client(analysis_result):
    return FakeAnalysisClient(result=analysis_result)


@pytest.fixture
def store(clock):
    return SessionStore(clock=clock)


@pytest.fixture
def chatbot(store, analysis_client, clock):
    counter = itertools.count(1)
    return ChatbotService(
        store=store,
        engine=DialogueEngine(),
        analysis_client=analysis_client,
        id_factory=lambda: f"msg-{next(counter)}",
        clock=clock,
    )
