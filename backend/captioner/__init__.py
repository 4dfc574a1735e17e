"""Image captioning service following Clean Architecture.

Layers:
- domain: caption use case, entities, errors and repository contracts
- data: HTTP image fetching and the Workers AI inference binding
- presentation: FastAPI app and the caption endpoint
- core: configuration, DI, and logging utilities
"""
