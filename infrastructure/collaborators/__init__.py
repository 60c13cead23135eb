# infrastructure/collaborators/__init__.py
from infrastructure.collaborators.in_memory_fetch import InMemoryFetchClient, MockRoute
from infrastructure.collaborators.recording import (
    EffectRecorder,
    RecordingBrowser,
    RecordingNavigator,
    RecordingToast,
    ScriptedDialogs,
)

__all__ = [
    "EffectRecorder",
    "InMemoryFetchClient",
    "MockRoute",
    "RecordingBrowser",
    "RecordingNavigator",
    "RecordingToast",
    "ScriptedDialogs",
]
