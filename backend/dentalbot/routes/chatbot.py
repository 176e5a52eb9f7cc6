"""
Chatbot REST routes.
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pathlib import Path
import logging

from dentalbot import constants
from dentalbot.config import config
from dentalbot.models.chat import ApiResponse, ChatRequest
from dentalbot.services.chatbot_service import ChatbotService
from dentalbot.utils.helpers import (
    format_file_size, generate_id, utc_now, validate_image_extension
)

logger = logging.getLogger("dentalbot.routes.chatbot")

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


def get_chatbot_service(request: Request) -> ChatbotService:
    """Dependency returning the process-wide chatbot service."""
    return request.app.state.chatbot


def dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


@router.post("/message", response_model=ApiResponse, response_model_exclude_none=True)
async def send_message(req: ChatRequest, chatbot: ChatbotService = Depends(get_chatbot_service)):
    """Send a message in a chat session."""
    if not req.session_id or not req.user_id or not req.message:
        raise HTTPException(
            status_code=400,
            detail="sessionId, userId, và message là bắt buộc"
        )
    try:
        response = await chatbot.process_message(
            req.session_id,
            req.user_id,
            req.message,
            req.attachments
        )
        return ApiResponse(success=True, data=dump(response))
    except Exception as e:
        logger.error(f"Error sending message: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to send message: {str(e)}")


@router.post("/upload", response_model=ApiResponse, response_model_exclude_none=True)
async def upload_image(
    session_id: str = Form(..., alias="sessionId"),
    user_id: str = Form(..., alias="userId"),
    image: UploadFile = File(...),
    chatbot: ChatbotService = Depends(get_chatbot_service),
):
    """Upload an image and run it through image analysis."""
    if not validate_image_extension(image.filename, config.ALLOWED_IMAGE_EXTENSIONS):
        raise HTTPException(status_code=400, detail="Chỉ chấp nhận file ảnh!")

    file_bytes = await image.read()
    if len(file_bytes) > config.MAX_FILE_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum {format_file_size(config.MAX_FILE_SIZE)}"
        )

    try:
        config.UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
        file_name = f"{int(utc_now().timestamp() * 1000)}-{generate_id()}{Path(image.filename).suffix.lower()}"
        file_path = config.UPLOAD_DIR / file_name
        file_path.write_bytes(file_bytes)
        logger.info(f"Saved upload {image.filename} as {file_path}")

        response = await chatbot.process_message(
            session_id,
            user_id,
            constants.UPLOAD_TRIGGER,
            [str(file_path)]
        )
        data = dump(response)
        data.update({"filePath": str(file_path), "fileName": file_name})
        return ApiResponse(success=True, data=data)
    except Exception as e:
        logger.error(f"Error uploading image: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to process image: {str(e)}")


@router.get("/session/{session_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def get_session(session_id: str, chatbot: ChatbotService = Depends(get_chatbot_service)):
    """Get a specific chat session."""
    session = chatbot.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session không tồn tại")
    return ApiResponse(success=True, data=dump(session))


@router.get("/sessions", response_model=ApiResponse, response_model_exclude_none=True)
async def get_all_sessions(chatbot: ChatbotService = Depends(get_chatbot_service)):
    """Get all live chat sessions."""
    return ApiResponse(success=True, data=[dump(s) for s in chatbot.get_all_sessions()])


@router.delete("/session/{session_id}", response_model=ApiResponse, response_model_exclude_none=True)
async def delete_session(session_id: str, chatbot: ChatbotService = Depends(get_chatbot_service)):
    """Delete a chat session."""
    if not chatbot.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session không tồn tại")
    return ApiResponse(success=True, data={"message": "Session đã được xóa"})


@router.get("/health", response_model=ApiResponse)
async def health_check():
    """Health check endpoint."""
    return ApiResponse(
        success=True,
        data={
            "status": "healthy",
            "timestamp": utc_now().isoformat(),
            "service": "Dental Chatbot Service"
        }
    )
