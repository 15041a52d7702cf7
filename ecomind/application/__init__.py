"""Application layer: DTOs, interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (Firestore repositories, Gemini, token verification).
"""
