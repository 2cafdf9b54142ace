from __future__ import annotations

import json
import logging
import os
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from responder import ChatResponder, ConversationTurn, Reply, build_responder
from responder.config import load_config

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _reply_payload(reply: Reply) -> Dict[str, Any]:
    return {
        "response": reply.text,
        "source": reply.provenance.value,
        "timestamp": _timestamp(),
    }


def create_app(
    config_path: Optional[str] = None,
    responder: Optional[ChatResponder] = None,
    data_path: Optional[str] = None,
) -> FastAPI:
    app = FastAPI(title="Office Assistant Chat")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if responder is None:
        cfg = load_config(config_path or os.environ.get("ASSISTANT_CONFIG"))
        responder = build_responder(cfg, data_path)
    chat = responder
    # Newest last; /api/chat/history serves newest first.
    recent: deque = deque(maxlen=HISTORY_LIMIT)

    def _remember(message: str, payload: Dict[str, Any]) -> None:
        recent.append({"message": message, "response": payload["response"], "timestamp": payload["timestamp"]})

    @app.post("/api/chat")
    async def post_chat(payload: Dict[str, Any] = Body(...)) -> Any:
        message = payload.get("message")
        if not isinstance(message, str) or not message.strip():
            return JSONResponse(status_code=400, content={"error": "Message is required"})
        history = payload.get("conversationHistory") or []
        if not isinstance(history, list):
            history = []
        reply = await chat.arespond(message, history)
        logger.info("chat user=%s source=%s", payload.get("userId"), reply.provenance.value)
        body = _reply_payload(reply)
        _remember(message, body)
        return body

    @app.get("/api/chat/history")
    async def chat_history() -> List[Dict[str, Any]]:
        return list(reversed(recent))

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        kb = chat.knowledge_base
        return {
            "status": "ok" if chat.ready else "not_ready",
            "entries": len(kb) if kb is not None else 0,
            "ai": chat.ai_configured(),
        }

    @app.websocket("/ws")
    async def ws_chat(websocket: WebSocket) -> None:
        await websocket.accept()
        history: List[ConversationTurn] = []
        try:
            while True:
                raw = await websocket.receive_text()
                query, extra_history = _parse_frame(raw)
                if not query:
                    await websocket.send_text(json.dumps({"error": "Message is required"}, ensure_ascii=False))
                    continue
                turns = extra_history if extra_history is not None else history
                reply = await chat.arespond(query, turns)
                body = _reply_payload(reply)
                _remember(query, body)
                await websocket.send_text(json.dumps(body, ensure_ascii=False))
                history.append(ConversationTurn(role="user", content=query))
                history.append(ConversationTurn(role="assistant", content=reply.text))
        except WebSocketDisconnect:
            return

    return app


def _parse_frame(raw: str) -> tuple[str, Optional[list]]:
    """Text frames are either plain text or ``{"message": ..., "history": [...]}``."""
    try:
        payload = json.loads(raw) if raw else {}
    except json.JSONDecodeError:
        return raw.strip(), None
    if not isinstance(payload, dict):
        return raw.strip(), None
    message = payload.get("message") or payload.get("text") or ""
    history = payload.get("history")
    if not isinstance(history, list):
        history = None
    return str(message).strip(), history


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
    cfg = load_config(os.environ.get("ASSISTANT_CONFIG"))
    server_cfg = cfg.get("server", {})
    uvicorn.run(
        create_app(responder=build_responder(cfg)),
        host=server_cfg.get("host", "0.0.0.0"),
        port=server_cfg.get("port", 9000),
    )
