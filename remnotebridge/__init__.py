"""remnotebridge - create rems through a local RemNote websocket bridge."""

__version__ = "0.1.0"
__logo__ = "🧠"
