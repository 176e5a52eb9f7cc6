"""
WebSocket handler for real-time chatbot conversations.
"""
from fastapi import WebSocket, WebSocketDisconnect
from typing import Dict, List, Optional
import logging

from dentalbot import constants
from dentalbot.models.chat import BotResponse
from dentalbot.services.chatbot_service import ChatbotService
from dentalbot.utils.helpers import utc_now

logger = logging.getLogger("dentalbot.websocket")


class ConnectionManager:
    """Manage WebSocket connections grouped in session rooms."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    def join(self, session_id: str, websocket: WebSocket):
        """Add a connection to a session room."""
        room = self.active_connections.setdefault(session_id, [])
        if websocket not in room:
            room.append(websocket)
        logger.info(f"WebSocket joined session: {session_id}")

    def disconnect(self, websocket: WebSocket):
        """Remove a connection from every room it joined."""
        for session_id in list(self.active_connections):
            room = self.active_connections[session_id]
            if websocket in room:
                room.remove(websocket)
                logger.info(f"WebSocket left session: {session_id}")
            if not room:
                del self.active_connections[session_id]

    async def broadcast(self, session_id: str, event: str, data: dict):
        """Broadcast an event to all connections in a session room."""
        if session_id in self.active_connections:
            for connection in self.active_connections[session_id][:]:
                try:
                    await connection.send_json({"event": event, "data": data})
                except Exception as e:
                    logger.error(f"Broadcast error: {str(e)}")
                    self.active_connections[session_id].remove(connection)

            if not self.active_connections[session_id]:
                del self.active_connections[session_id]


async def send_error(websocket: WebSocket, message: str):
    await websocket.send_json({"event": "error", "data": {"message": message}})


def is_attachment_list(value) -> bool:
    """None or a list of path strings."""
    if value is None:
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def bot_message_payload(response: BotResponse) -> dict:
    """Shape of the bot message broadcast to a session room."""
    payload = {
        "type": "bot",
        "content": response.message,
        "timestamp": utc_now().isoformat(),
        "options": response.options,
    }
    if response.analysis_result is not None:
        payload["analysisResult"] = response.analysis_result.model_dump(mode="json", by_alias=True)
    if response.rich_content is not None:
        payload["richContent"] = response.rich_content.model_dump(mode="json", by_alias=True)
    return payload


async def run_turn(
    manager: ConnectionManager,
    chatbot: ChatbotService,
    session_id: str,
    user_id: str,
    message: str,
    attachments: Optional[List[str]] = None,
):
    """Process one turn and broadcast the reply, bracketed by typing events."""
    await manager.broadcast(session_id, "typing", {"typing": True})
    try:
        response = await chatbot.process_message(session_id, user_id, message, attachments)
        await manager.broadcast(session_id, "message", bot_message_payload(response))
    finally:
        await manager.broadcast(session_id, "typing", {"typing": False})


async def handle_websocket(websocket: WebSocket, manager: ConnectionManager, chatbot: ChatbotService):
    """Handle a WebSocket connection and its chatbot events."""
    await websocket.accept()
    logger.info("WebSocket client connected")

    try:
        while True:
            frame = await websocket.receive_json()
            if not isinstance(frame, dict):
                await send_error(websocket, "Frame phải là một JSON object")
                continue
            event = frame.get("event")
            data = frame.get("data") or {}
            if not isinstance(data, dict):
                await send_error(websocket, "data phải là một JSON object")
                continue
            session_id = data.get("sessionId")
            user_id = data.get("userId")

            if event == "join":
                if not session_id or not user_id:
                    await send_error(websocket, "sessionId và userId là bắt buộc khi join")
                    continue
                manager.join(session_id, websocket)
                try:
                    await run_turn(manager, chatbot, session_id, user_id, constants.WELCOME_TRIGGER)
                except Exception as e:
                    logger.error(f"Failed to process welcome message: {e}")
                    await send_error(websocket, "Không thể gửi lời chào")

            elif event == "message":
                message = data.get("message")
                attachments = data.get("attachments")
                if not session_id or not user_id or not isinstance(message, str):
                    await send_error(websocket, "sessionId, userId, và message là bắt buộc")
                    continue
                if not is_attachment_list(attachments):
                    await send_error(websocket, "attachments phải là danh sách đường dẫn ảnh")
                    continue
                manager.join(session_id, websocket)
                try:
                    await run_turn(manager, chatbot, session_id, user_id, message, attachments)
                except Exception as e:
                    logger.error(f"Error processing message: {e}")
                    await send_error(websocket, "Có lỗi xảy ra khi xử lý tin nhắn")

            elif event == "upload_image":
                image_path = data.get("imagePath")
                if not session_id or not user_id or not image_path or not isinstance(image_path, str):
                    await send_error(websocket, "sessionId, userId và imagePath là bắt buộc")
                    continue
                manager.join(session_id, websocket)
                try:
                    await run_turn(
                        manager, chatbot, session_id, user_id,
                        constants.UPLOAD_TRIGGER, [image_path]
                    )
                except Exception as e:
                    logger.error(f"Error processing image upload: {e}")
                    await send_error(websocket, "Có lỗi xảy ra khi xử lý ảnh")

            else:
                await send_error(websocket, f"Unknown event: {event}")

    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("WebSocket client disconnected")
    except Exception as e:
        logger.error(f"WebSocket error: {str(e)}")
        manager.disconnect(websocket)
