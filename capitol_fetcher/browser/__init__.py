from .page import DEFAULT_POLICY, ResourcePolicy, acquire_page
from .session import RenderSession, RenderSessionManager, launch_chromium

__all__ = [
    "DEFAULT_POLICY",
    "ResourcePolicy",
    "acquire_page",
    "RenderSession",
    "RenderSessionManager",
    "launch_chromium",
]
