"""
Core wiring.

- ports.py: Protocols the runner and task actions depend on
- events.py: in-process event bus and lock tracker
- state.py: AppState built by the composition root
"""
