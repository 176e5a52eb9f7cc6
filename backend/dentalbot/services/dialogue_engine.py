"""
Step-transition logic for the dental intake conversation.
"""
import logging
from typing import Callable, Dict

from dentalbot import constants
from dentalbot.models.analysis import AnalysisResult
from dentalbot.models.chat import (
    BotResponse, ChatSession, ConversationStep, PatientInfo, RichContent, RichSection
)
from dentalbot.utils.helpers import format_vnd, parse_leading_int

logger = logging.getLogger("dentalbot.services.dialogue")

Handler = Callable[[ChatSession, str], BotResponse]

MIN_AGE, MAX_AGE = 1, 120
MIN_PAIN, MAX_PAIN = 1, 10
MAX_RECOMMENDATIONS = 5


class DialogueEngine:
    """
    Turns the current step and the user's text into a bot response.

    Handlers may record answers on session.patient_info; they never touch
    the message history or session.current_step. The caller applies
    response.next_step.
    """

    def __init__(self):
        self._handlers: Dict[ConversationStep, Handler] = {
            ConversationStep.WELCOME: self._welcome,
            ConversationStep.COLLECTING_NAME: self._collect_name,
            ConversationStep.COLLECTING_AGE: self._collect_age,
            ConversationStep.COLLECTING_SYMPTOMS: self._collect_symptoms,
            ConversationStep.COLLECTING_PAIN_LEVEL: self._collect_pain_level,
            ConversationStep.COLLECTING_LAST_VISIT: self._collect_last_visit,
            ConversationStep.ANALYSIS_COMPLETE: self._analysis_complete,
            ConversationStep.GENERAL: self._general,
        }
        missing = set(ConversationStep) - set(self._handlers)
        if missing:
            raise RuntimeError(f"No handler for steps: {sorted(s.value for s in missing)}")

    def respond(self, session: ChatSession, message: str) -> BotResponse:
        """Produce the reply for one text turn at the session's current step."""
        step = ConversationStep.coerce(session.current_step)
        logger.debug(f"Session {session.id}: handling step {step.value}")
        return self._handlers[step](session, message)

    # === Intake steps ===

    def _welcome(self, session: ChatSession, message: str) -> BotResponse:
        return BotResponse(
            message=constants.GREETING_PROMPT,
            next_step=ConversationStep.COLLECTING_NAME,
        )

    def _collect_name(self, session: ChatSession, message: str) -> BotResponse:
        name = message.strip()
        if not name:
            return BotResponse(
                message=constants.NAME_REPROMPT,
                next_step=ConversationStep.COLLECTING_NAME,
            )
        session.patient_info.name = name
        return BotResponse(
            message=constants.AGE_PROMPT.format(name=name),
            next_step=ConversationStep.COLLECTING_AGE,
        )

    def _collect_age(self, session: ChatSession, message: str) -> BotResponse:
        age = parse_leading_int(message)
        if age is None or not MIN_AGE <= age <= MAX_AGE:
            return BotResponse(
                message=constants.AGE_REPROMPT,
                next_step=ConversationStep.COLLECTING_AGE,
            )
        session.patient_info.age = age
        return BotResponse(
            message=constants.SYMPTOMS_PROMPT.format(age=age),
            next_step=ConversationStep.COLLECTING_SYMPTOMS,
        )

    def _collect_symptoms(self, session: ChatSession, message: str) -> BotResponse:
        symptoms = [part.strip() for part in message.split(",")]
        session.patient_info.symptoms = symptoms
        return BotResponse(
            message=constants.PAIN_LEVEL_PROMPT.format(symptoms=", ".join(symptoms)),
            next_step=ConversationStep.COLLECTING_PAIN_LEVEL,
        )

    def _collect_pain_level(self, session: ChatSession, message: str) -> BotResponse:
        pain_level = parse_leading_int(message)
        if pain_level is None or not MIN_PAIN <= pain_level <= MAX_PAIN:
            return BotResponse(
                message=constants.PAIN_LEVEL_REPROMPT,
                next_step=ConversationStep.COLLECTING_PAIN_LEVEL,
            )
        session.patient_info.pain_level = pain_level
        return BotResponse(
            message=constants.LAST_VISIT_PROMPT.format(pain_level=pain_level),
            next_step=ConversationStep.COLLECTING_LAST_VISIT,
        )

    def _collect_last_visit(self, session: ChatSession, message: str) -> BotResponse:
        info = session.patient_info
        info.last_dental_visit = message
        summary = build_intake_summary(info)

        highlights = []
        if info.pain_level is not None and info.pain_level >= 7:
            highlights.append("Mức đau cao — cần khám sớm")
        rich = RichContent(
            title="Kết quả đánh giá sơ bộ",
            highlights=highlights,
            sections=[
                RichSection(
                    heading="Thông tin bệnh nhân",
                    text=f"Tên: {info.name or '-'}\nTuổi: {info.age or '-'}",
                ),
                RichSection(heading="Tổng quan triệu chứng", text=summary),
                RichSection(
                    heading="Hành động đề xuất",
                    bullets=["Gửi ảnh X-quang nếu có", "Gửi ảnh chụp răng miệng", "Nhận khuyến nghị tiếp theo"],
                ),
            ],
        )
        return BotResponse(
            message=constants.SUMMARY_INTRO.format(summary=summary),
            options=list(constants.SUMMARY_OPTIONS),
            next_step=ConversationStep.ANALYSIS_COMPLETE,
            rich_content=rich,
        )

    # === Post-intake conversation ===

    def _analysis_complete(self, session: ChatSession, message: str) -> BotResponse:
        lower = message.lower()
        if _contains_any(lower, constants.EXPLAIN_KEYWORDS):
            return BotResponse(
                message=constants.EXPLANATION_MESSAGE,
                options=list(constants.EXPLANATION_OPTIONS),
            )
        if _contains_any(lower, constants.BOOKING_KEYWORDS):
            return BotResponse(
                message=constants.BOOKING_MESSAGE,
                options=list(constants.BOOKING_OPTIONS),
            )
        if _contains_any(lower, constants.FAREWELL_KEYWORDS):
            return BotResponse(
                message=constants.FAREWELL_MESSAGE,
                next_step=ConversationStep.WELCOME,
            )
        return BotResponse(
            message=constants.MENU_MESSAGE,
            options=list(constants.MENU_OPTIONS),
        )

    def _general(self, session: ChatSession, message: str) -> BotResponse:
        if _contains_any(message.lower(), constants.SYMPTOM_KEYWORDS):
            return BotResponse(
                message=constants.SYMPTOM_HINT_MESSAGE,
                options=list(constants.SYMPTOM_HINT_OPTIONS),
            )
        return BotResponse(
            message=constants.GENERAL_GREETING,
            options=list(constants.GENERAL_OPTIONS),
        )

    # === Image analysis rendering ===

    def analysis_response(self, result: AnalysisResult) -> BotResponse:
        """Render a successful image analysis as a bot reply."""
        confidence = f"{result.confidence * 100:.1f}%"
        cost = None
        if result.estimated_cost is not None:
            cost = (
                f"{format_vnd(result.estimated_cost.min)} - "
                f"{format_vnd(result.estimated_cost.max)} {result.estimated_cost.currency}"
            )
        recommendations = result.recommendations[:MAX_RECOMMENDATIONS]
        plan = result.treatment_plan

        lines = ["🔍 Kết quả phân tích ảnh (tóm tắt):"]
        lines.append(f"• Chẩn đoán: {result.diagnosis}")
        lines.append(f"• Độ tin cậy: {confidence}")
        lines.append(f"• Mức độ: {result.severity}")
        if cost:
            lines.append(f"• Chi phí ước tính: {cost}")

        if recommendations:
            lines.append("\n💡 Khuyến nghị:")
            lines.extend(f"• {r}" for r in recommendations)

        if plan.immediate or plan.short_term or plan.long_term:
            lines.append("\n🩺 Kế hoạch điều trị:")
            for label, items in (
                ("Ngay lập tức", plan.immediate),
                ("Ngắn hạn", plan.short_term),
                ("Dài hạn", plan.long_term),
            ):
                if items:
                    lines.append(f"• {label}: {', '.join(items)}")

        if result.risk_factors:
            lines.append("\n⚠️ Yếu tố nguy cơ:")
            lines.extend(f"• {r}" for r in result.risk_factors)

        lines.append("\nBạn muốn mình giải thích chi tiết hay giúp đặt lịch khám?")

        rich = RichContent(
            title="Kết quả phân tích ảnh",
            highlights=[result.diagnosis or "Kết quả sơ bộ"],
            sections=[
                RichSection(heading="Chẩn đoán", text=result.diagnosis),
                RichSection(heading="Độ tin cậy", text=confidence),
                RichSection(heading="Mức độ", text=result.severity or "-"),
                RichSection(heading="Ước tính chi phí", text=cost or "-"),
                RichSection(heading="Khuyến nghị", bullets=result.recommendations[:10]),
            ],
        )
        return BotResponse(
            message="\n".join(lines),
            options=list(constants.ANALYSIS_OPTIONS),
            next_step=ConversationStep.ANALYSIS_COMPLETE,
            analysis_result=result,
            rich_content=rich,
        )

    def analysis_failed_response(self) -> BotResponse:
        """Reply used when the image could not be analysed."""
        return BotResponse(
            message=constants.ANALYSIS_FAILED_MESSAGE,
            next_step=ConversationStep.ANALYSIS_COMPLETE,
        )


def build_intake_summary(info: PatientInfo) -> str:
    """Deterministic preliminary assessment from the collected patient info."""
    lines = []

    if info.age is not None:
        if info.age < 18:
            lines.append(constants.AGE_BRACKET_CHILD)
        elif info.age < 60:
            lines.append(constants.AGE_BRACKET_ADULT)
        else:
            lines.append(constants.AGE_BRACKET_SENIOR)

    if info.symptoms:
        joined = ", ".join(info.symptoms).lower()
        for keyword, line in constants.SYMPTOM_LINES:
            if keyword in joined:
                lines.append(line)

    if info.pain_level is not None:
        if info.pain_level <= 3:
            lines.append(constants.PAIN_MILD)
        elif info.pain_level <= 7:
            lines.append(constants.PAIN_MODERATE)
        else:
            lines.append(constants.PAIN_SEVERE)

    lines.append("")
    lines.append(constants.SUMMARY_RECOMMENDATION)
    return "\n".join(lines)


def _contains_any(text: str, keywords) -> bool:
    return any(k in text for k in keywords)
