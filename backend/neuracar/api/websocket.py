"""WebSocket fan-out of committed network results to every open editor."""
import json
from typing import Any

from fastapi import WebSocket


class NetworkBroadcaster:
    """Keeps the open editor sockets and pushes each commit to all of them.

    There is a single network per process, so every socket gets every
    update; a socket that fails a send is dropped.
    """

    def __init__(self):
        self._sockets: list[WebSocket] = []

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self._sockets.append(websocket)

    def disconnect(self, websocket: WebSocket):
        self._sockets = [ws for ws in self._sockets if ws is not websocket]

    def __len__(self) -> int:
        return len(self._sockets)

    async def broadcast(self, data: dict[str, Any]):
        if not self._sockets:
            return
        # Non-finite values are already encoded as null by the caller
        message = json.dumps(data, allow_nan=False)
        for ws in list(self._sockets):
            try:
                await ws.send_text(message)
            except Exception:
                self.disconnect(ws)


broadcaster = NetworkBroadcaster()
