"""Infrastructure layer: Firestore, Gemini and Firebase Authentication adapters."""
