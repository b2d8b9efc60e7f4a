# Live-update channel (Socket.IO)
#
# Clients connect with their JWT and are placed in a room for their hospital
# and a room for themselves. Services publish document changes after a write
# succeeds; dashboards re-render from the pushed payload instead of polling.

import socketio
from typing import Any, Dict, Optional
from carelink.config import settings
from carelink.core.security import decode_token
from carelink.core.logging import logger


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=settings.cors_origins,
    logger=False,
    engineio_logger=False,
)

socket_app = socketio.ASGIApp(sio)

# Store connected users: {sid: {uid, role, hospital_id}}
connected_users: Dict[str, Dict[str, Any]] = {}


def hospital_room(hospital_id: str) -> str:
    return f"hospital_{hospital_id}"


def user_room(uid: str) -> str:
    return f"user_{uid}"


async def authenticate_socket(auth_data: Optional[Dict]) -> Optional[Dict]:
    """
    Authenticate a socket connection using JWT token.

    Returns:
        User info dict or None if authentication fails
    """
    if not auth_data or "token" not in auth_data:
        logger.warning("Socket connection attempted without token")
        return None

    payload = decode_token(auth_data["token"])
    if not payload:
        logger.warning("Socket connection with invalid token - decode failed")
        return None

    # Imported here to keep the Socket.IO server importable before Beanie init
    from carelink.features.auth.models import User

    user = await User.find_one(User.uid == payload.get("sub"))
    if not user or not user.is_active:
        logger.warning(f"Socket auth - unknown or inactive user: {payload.get('sub')}")
        return None

    return {
        "uid": user.uid,
        "role": user.role.value,
        "hospital_id": user.hospital_id,
    }


@sio.event
async def connect(sid, environ, auth):
    """Handle client connection."""
    try:
        user_info = await authenticate_socket(auth)
    except Exception as e:
        logger.error(f"Socket authentication error: {e}")
        return False

    if not user_info:
        return False

    connected_users[sid] = user_info
    await sio.enter_room(sid, user_room(user_info["uid"]))
    if user_info["hospital_id"]:
        await sio.enter_room(sid, hospital_room(user_info["hospital_id"]))

    logger.info(f"Socket connected: {sid} ({user_info['role']}: {user_info['uid']})")
    return True


@sio.event
async def disconnect(sid):
    """Handle client disconnection."""
    user_info = connected_users.pop(sid, None)
    if user_info:
        logger.info(f"Socket disconnected: {sid} ({user_info['uid']})")


class RealtimeHub:
    """Best-effort publisher for document change events."""

    sio: Optional[socketio.AsyncServer] = None

    @classmethod
    def set_socketio(cls, server: Optional[socketio.AsyncServer]):
        cls.sio = server

    @classmethod
    async def publish(cls, collection: str, document: Dict[str, Any], room: Optional[str]) -> None:
        """Emit a ``<collection>:changed`` event to a room; never raises."""
        if not cls.sio or not room:
            return

        try:
            await cls.sio.emit(f"{collection}:changed", document, room=room)
        except Exception as e:
            logger.warning(f"Failed to publish {collection} change to {room}: {e}")
