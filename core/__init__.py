"""
Core package for Chat Relay.

Low-level building blocks shared by the answering layer and the API:
- Error taxonomy
- Data model (messages, history results, request lifecycle)
- Embedding + vector store adapters
- Logging helpers
"""
