"""Chat client — transcript state, controller and terminal front-end."""

from personachat.client.controller import ChatClientError, ChatController
from personachat.client.transcript import Transcript, new_message

__all__ = ["ChatClientError", "ChatController", "Transcript", "new_message"]
