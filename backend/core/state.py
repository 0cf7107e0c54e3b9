"""Global state for live code editor rooms"""

from typing import Dict, List
from fastapi import WebSocket

# Subscribers per code session: {session_id: [websocket, ...]}
session_subscribers: Dict[str, List[WebSocket]] = {}

def subscribe(session_id: str, websocket: WebSocket):
    session_subscribers.setdefault(session_id, []).append(websocket)

def unsubscribe(session_id: str, websocket: WebSocket):
    subscribers = session_subscribers.get(session_id)
    if not subscribers:
        return
    if websocket in subscribers:
        subscribers.remove(websocket)
    if not subscribers:
        del session_subscribers[session_id]
