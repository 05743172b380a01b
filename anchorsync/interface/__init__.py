"""Mini README: Host-facing interfaces for AnchorSync.

Exports the FastAPI application factory for the perception bridge and the
event-script replay helpers used by the command line.
"""

from .replay import ScriptClock, load_event_script, replay_events
from .web_app import create_application

__all__ = ["ScriptClock", "create_application", "load_event_script", "replay_events"]
