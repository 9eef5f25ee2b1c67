from notes_session.flow.controller import (
    AuthFlow,
    FlowKind,
    FlowState,
    ProtectedFlow,
    SessionContext,
    SessionFlowController,
    SessionListener,
)

__all__ = [
    "AuthFlow",
    "FlowKind",
    "FlowState",
    "ProtectedFlow",
    "SessionContext",
    "SessionFlowController",
    "SessionListener",
]
