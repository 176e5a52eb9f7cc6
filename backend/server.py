"""
Main server module for the dental chatbot service.
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, WebSocket
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from datetime import datetime, timezone
from typing import Optional
import logging

from dentalbot.config import config
from dentalbot.routes import chatbot
from dentalbot.services.chatbot_service import ChatbotService
from dentalbot.services.dialogue_engine import DialogueEngine
from dentalbot.services.image_analysis import ImageAnalysisClient
from dentalbot.services.session_store import SessionStore
from dentalbot.websocket import ConnectionManager, handle_websocket

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("dentalbot.server")


def build_chatbot_service() -> ChatbotService:
    """Wire the chatbot service from configuration."""
    return ChatbotService(
        store=SessionStore(
            ttl_seconds=config.SESSION_TTL_SECONDS,
            max_sessions=config.MAX_SESSIONS,
        ),
        engine=DialogueEngine(),
        analysis_client=ImageAnalysisClient(
            url=config.AI_ANALYSIS_URL,
            timeout=config.AI_ANALYSIS_TIMEOUT,
        ),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        config.validate()
        logger.info("✅ Dental chatbot service started successfully")
        logger.info(f"🔬 Analysis endpoint: {config.AI_ANALYSIS_URL} (timeout {config.AI_ANALYSIS_TIMEOUT:g}s)")
        logger.info(f"🌐 CORS origins: {config.CORS_ORIGINS}")
    except Exception as e:
        logger.error(f"❌ Startup failed: {e}")
        raise
    yield
    logger.info("✅ Dental chatbot service shutdown complete")


def create_app(chatbot_service: Optional[ChatbotService] = None) -> FastAPI:
    """Create the FastAPI application with a single chatbot service instance."""
    app = FastAPI(
        title="Dental Chatbot Service",
        description="Guided dental intake chatbot with X-ray image analysis",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.chatbot = chatbot_service or build_chatbot_service()
    app.state.connections = ConnectionManager()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"]
    )

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": "Dental Chatbot Service",
            "sessions": len(app.state.chatbot.store),
        }

    # WebSocket endpoint
    @app.websocket("/ws/chatbot")
    async def websocket_endpoint(websocket: WebSocket):
        """WebSocket endpoint for real-time chat."""
        await handle_websocket(websocket, app.state.connections, app.state.chatbot)

    app.include_router(chatbot.router, prefix="/api")

    @app.exception_handler(500)
    async def internal_error_handler(request, exc):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"}
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "server:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD
    )
