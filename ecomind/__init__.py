"""EcoMind backend: consent-gated AI relationship insights over Firestore and Gemini."""

__version__ = "1.0.0"
