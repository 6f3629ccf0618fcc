"""
taskdash - terminal dashboard for a JSON-backed task list.

Architecture:
- providers.py / task_store.py: Task snapshots and the file-backed store
- events.py: key poller + ticker threads merged into one event queue
- state.py: pure menu/selection state machine emitting store intents
- views/: rich layout composition (pure functions of state + snapshot)
- terminal.py: fullscreen rendering and keyboard polling
- app.py: render loop and console entry point

Extensibility points:
1. New keys: extend the transition table in state.py
2. New storage backends: implement the TaskStore protocol
3. New panels: add renderables in views/widgets.py, place them in views/layout.py
"""

__version__ = "0.1.0"
