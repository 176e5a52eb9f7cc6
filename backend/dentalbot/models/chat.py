"""
Pydantic models for the dental chatbot.
"""
from enum import Enum
from pydantic import ConfigDict, Field
from typing import Any, Optional, List
from datetime import datetime

from dentalbot.models.analysis import AnalysisResult
from dentalbot.models.base import CamelModel
from dentalbot.utils.helpers import generate_id, utc_now


class ConversationStep(str, Enum):
    """Stages of the guided intake flow."""
    WELCOME = "welcome"
    COLLECTING_NAME = "collecting_name"
    COLLECTING_AGE = "collecting_age"
    COLLECTING_SYMPTOMS = "collecting_symptoms"
    COLLECTING_PAIN_LEVEL = "collecting_pain_level"
    COLLECTING_LAST_VISIT = "collecting_last_visit"
    ANALYSIS_COMPLETE = "analysis_complete"
    GENERAL = "general"

    @classmethod
    def coerce(cls, value) -> "ConversationStep":
        """Map any stored step value to a known step, falling back to GENERAL."""
        try:
            return cls(value)
        except ValueError:
            return cls.GENERAL


class MessageRole(str, Enum):
    USER = "user"
    BOT = "bot"


class ChatMessage(CamelModel):
    """A single turn entry in a session's history."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_id)
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=utc_now)
    attachments: Optional[List[str]] = None


class PatientInfo(CamelModel):
    """Patient details collected during intake."""
    name: Optional[str] = None
    age: Optional[int] = None
    symptoms: Optional[List[str]] = None
    pain_level: Optional[int] = None
    last_dental_visit: Optional[str] = None


class ChatSession(CamelModel):
    """Chat session model."""
    id: str
    user_id: str
    messages: List[ChatMessage] = Field(default_factory=list)
    current_step: ConversationStep = ConversationStep.WELCOME
    patient_info: PatientInfo = Field(default_factory=PatientInfo)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class RichSection(CamelModel):
    heading: Optional[str] = None
    text: Optional[str] = None
    bullets: List[str] = Field(default_factory=list)


class RichContent(CamelModel):
    """Structured card the UI may render instead of plain text."""
    title: Optional[str] = None
    highlights: List[str] = Field(default_factory=list)
    sections: List[RichSection] = Field(default_factory=list)


class BotResponse(CamelModel):
    """Bot reply for one turn."""
    message: str
    options: Optional[List[str]] = None
    next_step: Optional[ConversationStep] = None
    requires_image: Optional[bool] = None
    analysis_result: Optional[AnalysisResult] = None
    rich_content: Optional[RichContent] = None


class ChatRequest(CamelModel):
    """Request model for sending a message."""
    session_id: str
    user_id: str
    message: str
    attachments: Optional[List[str]] = None


class ApiResponse(CamelModel):
    """Envelope returned by the REST endpoints."""
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
