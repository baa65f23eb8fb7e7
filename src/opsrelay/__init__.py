"""opsrelay -- WebSocket relay between clients, a Gemini model and a shell.

Three endpoints share one model client: a single-shot relay, a multi-turn
chat relay, and an operations relay that runs the model's replies as bash
commands and returns their output.
"""

__version__ = "0.1.0"
