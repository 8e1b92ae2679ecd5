"""Optional remote dialogue backend."""

from whodunit.responder.client import ResponderClient, ResponderError
from whodunit.responder.prompt import build_system_prompt
from whodunit.responder.tags import ParsedReply, parse_reply

__all__ = [
    "ParsedReply",
    "ResponderClient",
    "ResponderError",
    "build_system_prompt",
    "parse_reply",
]
